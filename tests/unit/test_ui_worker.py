"""Tests for the calculation worker; skipped where PySide6 or a keyboard backend is unavailable."""

import pytest

UI = pytest.importorskip("unitscalc.UI")

from unitscalc import error as E
from unitscalc.Calculator import Calculator


def run_worker(text, units):
    worker = UI.Worker(Calculator(), text, units)
    finished = []
    worker.job_finished.connect(lambda expression, result, source: finished.append((expression, result, source)))
    worker.run_Calc()
    assert len(finished) == 1
    return finished[0]


class TestWorker:

    def test_result(self):
        expression, result, source = run_worker("1in + 1cm", "mm")
        assert source == "1in + 1cm"
        assert Calculator().pretty_print(result) == "35.4mm"

    def test_conversion_error_gets_input_text(self):
        expression, error, source = run_worker("1cm", "yd")
        assert expression is None
        assert isinstance(error, E.ConversionError)
        assert error.expression == "1cm"

    def test_existing_expression_is_kept(self):
        class FailingCalculator(Calculator):
            def calculate(self, expression, units):
                raise E.ConversionError("no", code="3000", expression="from calculate")

        worker = UI.Worker(FailingCalculator(), "1cm", "mm")
        finished = []
        worker.job_finished.connect(lambda expression, result, source: finished.append(result))
        worker.run_Calc()
        assert finished[0].expression == "from calculate"

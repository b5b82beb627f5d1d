# UI.py
""""PySide6 user interface for the Units Calculator.

Structure
---------
- Calculator window: banner, input line, target units selector, output line, history table
- Settings UI: modal dialog for user preferences

Responsibilities (Calculator window)
------------------------------------
- Hand the typed expression and selected units to the Calculator in a worker thread
- Render results, keep the history table (newest first, limited size)
- Show LexError / SyntaxError / ConversionError as dialogs
- Clipboard integration: copy button, and copy-on-Shift when a result arrives


Responsibilities (Settings)
---------------------------

- Load Current Settings and Settings Descriptions via config_manager
- Validate user input against the limits in config_manager (e.g. decimal places 0-20)
- Save and apply precision, history size and theme changes immediately


Threading Note
--------------
Evaluation is executed off the UI thread in Worker(QObject).
Results (or errors) are emitted via a Qt signal and handled back in the UI.
"""""

from PySide6 import QtWidgets
from PySide6.QtCore import Qt, QObject, Signal
import sys
import logging
import threading
from pynput.keyboard import Controller
import pyperclip
from . import error as E  # Imports error.py as a module
from . import config_manager as config_manager  # Imports config_manager.py as a module
from .Calculator import Calculator
from .Formatter import ExpressionFormatter, FormatterConfig
from .history import History
from .Units import Units, IN_MM, IN_PT, IN_PX

logger = logging.getLogger(__name__)

VERSION = "1.0"


def banner(formatter):
    """Title line with the inch based constants, e.g. "1in = 25.4mm = 72pt = 300px"."""
    return (f"Units Calculator v{VERSION}; 1in = {formatter.format_amount(IN_MM)}mm"
            f" = {formatter.format_amount(IN_PT)}pt = {formatter.format_amount(IN_PX)}px")


def is_shift_pressed():
    """""

    Small and simple check, whether shift is pressed or not.
    Used for the "shift to copy" setting.

    """""

    keyboard_controller = Controller()
    return keyboard_controller.shift_pressed


class Worker(QObject):
    """""

    Runs one calculation in a separate thread and emits a Signal when it is done / failed,
    back to the Calculator window for processing.

    """""

    # (input tree or None, result Measurement or CalcError, input text)
    job_finished = Signal(object, object, str)

    def __init__(self, calculator, text, units):
        super().__init__()
        self.calculator = calculator
        self.text = text
        self.units = units

    def run_Calc(self):

        try:
            expression = self.calculator.analyze(self.text)
            result = self.calculator.calculate(expression, self.units)
            self.job_finished.emit(expression, result, self.text)

        except E.CalcError as e:
            # Known, handled error (e.g. unknown units)
            if e.expression is None:
                e.expression = self.text
            self.job_finished.emit(None, e, self.text)

        except Exception as e:
            # Unexpected crash we didn't plan for (e.g. a bug in the code)
            logger.exception("Unexpected error while calculating %r", self.text)
            critical_error = E.CalcError(message=f"Unexpected crash: {e}", code="9999", expression=self.text)
            self.job_finished.emit(None, critical_error, self.text)


class SettingsDialog(QtWidgets.QDialog):
    """""

    Settings window. Booleans become checkboxes, integers become input fields and
    the default units get a combo box. Saving goes through config_manager.

    """""

    settings_saved = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}

        self.setWindowTitle("Units Calculator Settings")
        self.setMinimumSize(320, 220)
        main_layout = QtWidgets.QVBoxLayout(self)

        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                minimum, maximum = config_manager.setting_limits(key_value)
                label = QtWidgets.QLabel(f"{description} ({minimum}-{maximum}):")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))  # Show current value as placeholder
                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

            elif key_value == "default_units":
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                combo = QtWidgets.QComboBox()
                combo.addItems(Units.codes())
                combo.setCurrentText(str(value))
                row_h_layout.addWidget(QtWidgets.QLabel(description + ":"))
                row_h_layout.addWidget(combo)
                self.widgets[key_value] = combo

        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(self.save_settings)
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self):
        setting_value_list = dict(self.setting_value_list)

        for key_value, widget in self.widgets.items():

            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()

            elif isinstance(widget, QtWidgets.QComboBox):
                setting_value_list[key_value] = widget.currentText()

            elif isinstance(widget, QtWidgets.QLineEdit):
                new_value_str = widget.text().strip()

                # If user left it blank, keep the old value
                if new_value_str == "":
                    continue

                try:
                    new_value_int = config_manager.check_setting(key_value, int(new_value_str))
                except ValueError as e:
                    # Show an error box and STOP the save process
                    logger.info("Invalid input for %s: %s", key_value, e)
                    QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                                   f"Error 5001: {E.ERROR_MESSAGES['5001']}\n\n"
                                                   f"Error in input for '{key_value}':\n\n{e}")
                    return

                setting_value_list[key_value] = new_value_int

        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.setting_value_list = saved_settings
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(self, "Error",
                                           f"Error 5000: {E.ERROR_MESSAGES['5000']}{config_manager.config_json}")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QComboBox {background-color: #444444;color: white;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class CalculatorWindow(QtWidgets.QWidget):

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")

        # --- 2. Engine and State ---
        self.formatter = self.build_formatter()
        self.calculator = Calculator(self.formatter)
        self.history = History(self.setting_value_list["history_size"])
        self.thread_active = False

        # --- 3. Window Setup ---
        self.setWindowTitle("Units Calculator")
        self.resize(520, 420)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        self.label = QtWidgets.QLabel(banner(self.formatter))
        main_v_layout.addWidget(self.label)

        # --- 4. Input Row: expression, target units, settings ---
        input_row = QtWidgets.QHBoxLayout()
        main_v_layout.addLayout(input_row)

        self.input_field = QtWidgets.QLineEdit()
        self.input_field.setPlaceholderText("e.g. 1in + 2cm - (3mm - 1px)")
        self.input_field.returnPressed.connect(self.start_calculation)
        input_row.addWidget(self.input_field, 1)

        self.units_combo = QtWidgets.QComboBox()
        self.units_combo.addItems(Units.codes())
        self.units_combo.setCurrentText(str(self.setting_value_list["default_units"]))
        input_row.addWidget(self.units_combo)

        settings_button = QtWidgets.QPushButton("Settings")
        settings_button.clicked.connect(self.open_settings)
        input_row.addWidget(settings_button)

        # --- 5. Output Row ---
        output_row = QtWidgets.QHBoxLayout()
        main_v_layout.addLayout(output_row)

        self.output_field = QtWidgets.QLineEdit()
        self.output_field.setReadOnly(True)
        output_row.addWidget(self.output_field, 1)

        copy_button = QtWidgets.QPushButton("Copy")
        copy_button.clicked.connect(self.copy_output)
        output_row.addWidget(copy_button)

        # --- 6. History Table ---
        self.history_table = QtWidgets.QTableWidget(0, 2)
        self.history_table.setHorizontalHeaderLabels(["Expression", "Result"])
        self.history_table.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)
        self.history_table.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self.history_table.horizontalHeader().setSectionResizeMode(0, QtWidgets.QHeaderView.ResizeMode.Stretch)
        self.history_table.verticalHeader().setVisible(False)
        main_v_layout.addWidget(self.history_table, 1)

        self.update_darkmode()

    def build_formatter(self):
        return ExpressionFormatter(FormatterConfig(max_fraction_digits=self.setting_value_list["decimal_places"]))

    # --- Calculation ---
    def start_calculation(self):
        if self.thread_active:
            self.show_error(E.CalcError("A calculation is already running", code="4000",
                                        expression=self.input_field.text()))
            return

        self.thread_active = True
        self.output_field.setText("...")  # Show "..." to indicate loading

        worker_instance = Worker(self.calculator, self.input_field.text(), self.units_combo.currentText())
        # Connect before starting, so a fast result is never lost
        worker_instance.job_finished.connect(self.Calc_result, Qt.ConnectionType.QueuedConnection)
        self.worker_instance = worker_instance
        my_thread = threading.Thread(target=worker_instance.run_Calc, daemon=True)
        my_thread.start()

    def Calc_result(self, expression, result, text):
        self.thread_active = False

        if isinstance(result, E.CalcError):
            self.output_field.setText(str(result))
            self.show_error(result)
            return

        result_text = self.calculator.pretty_print(result)
        self.output_field.setText(result_text)
        self.history.add(expression, result)
        self.refresh_history()
        self.history_table.setCurrentCell(0, 1)

        if self.setting_value_list["shift_to_copy"] and is_shift_pressed():
            pyperclip.copy(result_text)

    def refresh_history(self):
        rows = self.history.rows(self.formatter)
        self.history_table.setRowCount(len(rows))
        for row, (expression_text, result_text) in enumerate(rows):
            self.history_table.setItem(row, 0, QtWidgets.QTableWidgetItem(expression_text))
            self.history_table.setItem(row, 1, QtWidgets.QTableWidgetItem(result_text))

    def copy_output(self):
        text = self.output_field.text()
        if not text:
            self.show_error(E.CalcError("The output field is empty", code="4001"))
            return
        pyperclip.copy(text)

    def show_error(self, error_obj):
        error_box = QtWidgets.QMessageBox(self)
        error_box.setIcon(QtWidgets.QMessageBox.Critical)
        error_box.setWindowTitle("Calculation error")
        error_box.setText(E.describe(error_obj))
        error_box.setInformativeText(f"Details: {error_obj}\nExpression: {error_obj.expression}")
        error_box.setStandardButtons(QtWidgets.QMessageBox.Ok)
        error_box.setStyleSheet(self.get_message_box_stylesheet())
        error_box.exec()

    # --- Settings ---
    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()  # "exec" makes the dialog modal (blocks main window)

        # --- Reload settings after dialog closes ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.formatter = self.build_formatter()
        self.calculator = Calculator(self.formatter)
        self.history.resize(self.setting_value_list["history_size"])
        self.label.setText(banner(self.formatter))
        self.refresh_history()
        self.update_darkmode()

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QWidget {background-color: #121212; color: white;}
                        QLineEdit {background-color: #2e2e2e; color: white; border: 1px solid #444444;}
                        QComboBox {background-color: #2e2e2e; color: white;}
                        QPushButton {background-color: #2e2e2e; color: white; padding: 4px 10px;}
                        QTableWidget {background-color: #1e1e1e; color: white; gridline-color: #444444;}
                        QHeaderView::section {background-color: #2e2e2e; color: white;}""")
        else:
            self.setStyleSheet("")

    def get_message_box_stylesheet(self):
        if self.setting_value_list["darkmode"] == True:
            return """
                QMessageBox {
                    background-color: #121212;
                    color: white;
                }
                QLabel {
                    color: white;
                }
                QPushButton {
                    background-color: #2e2e2e;
                    color: white;
                    border: 1px solid #444444;
                    padding: 5px 15px;
                }
            """
        else:
            return ""


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

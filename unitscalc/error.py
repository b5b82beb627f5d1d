

class CalcError(Exception):
    def __init__(self, message, code="9999", expression=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.expression = expression

    def __str__(self):
        return f"{type(self).__name__}: {self.message}"


class LexError(CalcError):
    """Raised by the tokenizer; remembers where in the input it gave up."""

    def __init__(self, message, position, data, code="1001"):
        super().__init__(message, code=code, expression=data)
        self.position = position
        self.data = data

    def __str__(self):
        # Mark the offending offset with "[]" so the user can spot it in long input
        marked = self.data[:self.position] + "[]" + self.data[self.position:]
        return f"LexError: {self.message} at pos {self.position}: `{marked}`"


class SyntaxError(CalcError):
    pass


class ConversionError(CalcError):
    pass



ERROR_CATEGORIES = {

    "1" : "Lexical Error",
    "2" : "Syntax Error",
    "3" : "Conversion Error",
    "4" : "UI Error",
    "5" : "Configuration Error",
    "9" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error (see ERROR_CATEGORIES)
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "1000" : "Invalid character.",
    "1001" : "Unexpected character.",
    "1002" : "Unknown unit: ", # + unit name
    "1003" : "Unexpected end of input.",

    "2000" : "Missing measurement.",
    "2001" : "Token in wrong place: ", # + token
    "2002" : "Missing ')'.",
    "2003" : "Too many tokens, bracket mismatch maybe.",
    "2004" : "Number without unit.",
    "2005" : "Missing measurement after operator.",

    "3000" : "Unknown target unit: ", # + unit name

    "4000" : "Calculation already running!",
    "4001" : "Nothing to copy.",

    "5000" : "Not all Settings could be saved: ", # + setting
    "5001" : "Invalid setting value.",

    "9999" : "Unexpected Error: " #+error
}


def describe(error):
    """Return the headline the UI shows for an error: code, category text and short message."""
    code = getattr(error, "code", "9999")
    category = ERROR_CATEGORIES.get(code[:1], ERROR_CATEGORIES["9"])
    return f"{category} {code}: {ERROR_MESSAGES.get(code, 'Unknown error')}"

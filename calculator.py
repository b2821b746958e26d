import re

from config import ERROR_MESSAGE
from parsing import evaluate

KEYS = "0123456789.()"
OPERATOR_KEYS = "+-*/×÷"
# trailing numeric literal
TRAILING_NUMBER = re.compile(r"\d*\.?\d+$")


class Calculator:
    """Key-by-key input buffer for the evaluator.

    Holds the expression being typed and the last rendered result. Only
    equals() touches the evaluator; every other key just edits the text.
    """

    def __init__(self):
        self.expression = ""
        self.result = ""

    def num_click(self, text):
        if text not in KEYS:
            raise ValueError(f"not a digit key: {text!r}")
        if self.expression == "0" and text == "0":
            return
        self.expression += text

    def add_operator(self, op):
        if op not in OPERATOR_KEYS:
            raise ValueError(f"not an operator key: {op!r}")
        if not self.expression:
            return
        if self.expression[-1] in OPERATOR_KEYS or self.expression[-1] == ".":
            # replace the last operator
            self.expression = self.expression[:-1] + op
        else:
            self.expression += op

    def delete(self):
        self.expression = self.expression[:-1]

    def all_clear(self):
        self.expression = ""
        self.result = ""

    def toggle_sign(self):
        match = TRAILING_NUMBER.search(self.expression)
        if match is None:
            return
        start = match.start()
        head = self.expression[:start]
        # a '-' is a sign only at the start or right after another operator
        if head.endswith("-") and (len(head) == 1 or head[-2] in OPERATOR_KEYS + "("):
            self.expression = head[:-1] + match.group(0)
        else:
            self.expression = head + "-" + match.group(0)

    def equals(self):
        outcome = evaluate(self.expression)
        self.result = str(outcome.value) if outcome.ok else ERROR_MESSAGE
        return outcome

    @property
    def display(self):
        return self.expression or "0"

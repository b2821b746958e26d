import math
import re
from collections import namedtuple
from dataclasses import dataclass

# ---- operator precedence. multiplicative always outranks additive
PRECEDENCE = {'+': 1, '-': 1, '*': 2, '/': 2}
OPERATORS = "+-*/"
NUMBER_CHARS = "0123456789."
# display glyph -> operator symbol
GLYPHS = {'×': '*', '÷': '/'}

DECIMAL = re.compile(r"[0-9]+\.?[0-9]*|\.[0-9]+")

# ---- error taxonomy
class EvalError(Exception):
    pass

class MalformedNumber(EvalError):
    pass

class InsufficientOperands(EvalError):
    pass

class MalformedExpression(EvalError):
    pass

# ---- token model
@dataclass(frozen=True)
class NumberToken:
    text: str

    def __str__(self):
        return self.text

@dataclass(frozen=True)
class OperatorToken:
    symbol: str

    def __post_init__(self):
        if self.symbol not in PRECEDENCE:
            raise ValueError(f"unknown operator: {self.symbol!r}")

    def __str__(self):
        return self.symbol

    @property
    def precedence(self):
        return PRECEDENCE[self.symbol]

@dataclass(frozen=True)
class LeftParen:
    def __str__(self):
        return "("

@dataclass(frozen=True)
class RightParen:
    def __str__(self):
        return ")"

class EvalResult(namedtuple("EvalResult", "value error")):
    """Outcome of one evaluation: a float value, or the EvalError that stopped it."""
    __slots__ = ()

    @property
    def ok(self):
        return self.error is None

    def unwrap(self):
        if self.error is not None:
            raise self.error
        return self.value

def normalize(expression):
    for glyph, symbol in GLYPHS.items():
        expression = expression.replace(glyph, symbol)
    return expression

# ---- tokenizer
def tokenize(expression):
    tokens = []
    buffer = ""
    for ch in expression:
        if ch in NUMBER_CHARS:
            buffer += ch
        elif ch in OPERATORS or ch in "()":
            if buffer:
                tokens.append(NumberToken(buffer))
                buffer = ""
            if ch == '(':
                tokens.append(LeftParen())
            elif ch == ')':
                tokens.append(RightParen())
            else:
                tokens.append(OperatorToken(ch))
        # anything else is dropped
    if buffer:
        tokens.append(NumberToken(buffer))
    return tokens

# ---- infix -> postfix (shunting-yard)
def to_postfix(tokens):
    stack = []
    output = []
    for token in tokens:
        if isinstance(token, NumberToken):
            output.append(token)
        elif isinstance(token, OperatorToken):
            # >= pops equal precedence first: left-associative
            while stack and isinstance(stack[-1], OperatorToken) and stack[-1].precedence >= token.precedence:
                output.append(stack.pop())
            stack.append(token)
        elif isinstance(token, LeftParen):
            stack.append(token)
        elif isinstance(token, RightParen):
            while stack and not isinstance(stack[-1], LeftParen):
                output.append(stack.pop())
            if stack:
                stack.pop()
    while stack:
        token = stack.pop()
        if not isinstance(token, LeftParen):
            output.append(token)
    return output

# ---- postfix evaluation
def parse_number(text):
    if not DECIMAL.fullmatch(text):
        raise MalformedNumber(f"malformed number: {text!r}")
    return float(text)

def apply_operator(symbol, left, right):
    if symbol == '+':
        return left + right
    if symbol == '-':
        return left - right
    if symbol == '*':
        return left * right
    if symbol == '/':
        try:
            return left / right
        except ZeroDivisionError:
            # IEEE-754: x/0 is a signed infinity, 0/0 is nan
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
    raise MalformedExpression(f"unknown operator: {symbol!r}")

def postorder_traversal(tokens):
    stack = []
    for token in tokens:
        if isinstance(token, NumberToken):
            stack.append(parse_number(token.text))
        elif isinstance(token, OperatorToken):
            if len(stack) < 2:
                raise InsufficientOperands(f"operator {token.symbol!r} needs two operands, has {len(stack)}")
            right = stack.pop()
            left = stack.pop()
            stack.append(apply_operator(token.symbol, left, right))
        else:
            raise MalformedExpression(f"unexpected token in postfix: {token!s}")
    if not stack:
        return 0.0
    # leftover operands ("3 4") are tolerated: the top wins
    return stack[-1]

def eval_postfix(tokens):
    try:
        return EvalResult(postorder_traversal(tokens), None)
    except EvalError as e:
        return EvalResult(None, e)

# ---- pipeline entry point
def evaluate(expression):
    tokens = tokenize(normalize(expression))
    return eval_postfix(to_postfix(tokens))

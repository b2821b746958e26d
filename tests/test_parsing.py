import math
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from parsing import (
    EvalResult,
    InsufficientOperands,
    LeftParen,
    MalformedExpression,
    MalformedNumber,
    NumberToken,
    OperatorToken,
    RightParen,
    eval_postfix,
    evaluate,
    normalize,
    tokenize,
    to_postfix,
)


def postfix_text(expression):
    return " ".join(str(t) for t in to_postfix(tokenize(expression)))


class TestTokenize(unittest.TestCase):
    def test_numbers_and_operators(self):
        self.assertEqual(tokenize("12.5+3*(4-1)"), [
            NumberToken("12.5"), OperatorToken("+"), NumberToken("3"), OperatorToken("*"),
            LeftParen(), NumberToken("4"), OperatorToken("-"), NumberToken("1"), RightParen(),
        ])

    def test_unknown_characters_dropped(self):
        self.assertEqual(tokenize(" 2 × 3 % a"), [NumberToken("23")])
        self.assertEqual(tokenize("2 + 3"), [NumberToken("2"), OperatorToken("+"), NumberToken("3")])

    def test_malformed_number_text_passes_through(self):
        self.assertEqual(tokenize("3.4.5"), [NumberToken("3.4.5")])
        self.assertEqual(tokenize("."), [NumberToken(".")])

    def test_empty(self):
        self.assertEqual(tokenize(""), [])

    def test_idempotent(self):
        canonical = normalize("(1.5+2)×3÷4")
        self.assertEqual(tokenize(canonical), tokenize(canonical))

    def test_paren_tokens_differ(self):
        self.assertNotEqual(LeftParen(), RightParen())
        self.assertNotEqual(NumberToken("+"), OperatorToken("+"))


class TestToPostfix(unittest.TestCase):
    def test_precedence(self):
        self.assertEqual(postfix_text("2+3*4"), "2 3 4 * +")
        self.assertEqual(postfix_text("2*3+4"), "2 3 * 4 +")

    def test_left_associative(self):
        self.assertEqual(postfix_text("8-3-2"), "8 3 - 2 -")
        self.assertEqual(postfix_text("8/4*2"), "8 4 / 2 *")

    def test_parentheses(self):
        self.assertEqual(postfix_text("(2+3)*4"), "2 3 + 4 *")

    def test_single_number_unchanged(self):
        tokens = [NumberToken("42")]
        self.assertEqual(to_postfix(tokens), tokens)

    def test_unknown_operator_symbol_rejected(self):
        with self.assertRaises(ValueError):
            OperatorToken("%")
        tokens = [NumberToken("1"), OperatorToken("+"), NumberToken("2")]
        self.assertEqual(to_postfix(tokens), [NumberToken("1"), NumberToken("2"), OperatorToken("+")])

    def test_unmatched_parens_dropped(self):
        self.assertEqual(postfix_text("(2+3"), "2 3 +")
        self.assertEqual(postfix_text("2+3)*4"), "2 3 + 4 *")
        self.assertEqual(postfix_text(")("), "")


class TestEvalPostfix(unittest.TestCase):
    def test_operand_order(self):
        tokens = [NumberToken("10"), NumberToken("4"), OperatorToken("-")]
        self.assertEqual(eval_postfix(tokens), EvalResult(6.0, None))

    def test_insufficient_operands(self):
        result = eval_postfix([OperatorToken("+")])
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, InsufficientOperands)

        result = eval_postfix([NumberToken("1"), OperatorToken("*")])
        self.assertIsInstance(result.error, InsufficientOperands)

    def test_stray_paren(self):
        result = eval_postfix([NumberToken("1"), LeftParen()])
        self.assertIsInstance(result.error, MalformedExpression)

    def test_malformed_number(self):
        result = eval_postfix([NumberToken("3.4.5")])
        self.assertIsInstance(result.error, MalformedNumber)
        self.assertIsInstance(eval_postfix([NumberToken(".")]).error, MalformedNumber)

    def test_number_text_must_be_plain_ascii_decimal(self):
        self.assertIsInstance(eval_postfix([NumberToken("3\n")]).error, MalformedNumber)
        self.assertIsInstance(eval_postfix([NumberToken("\u0663")]).error, MalformedNumber)
        self.assertIsInstance(eval_postfix([NumberToken("1e5")]).error, MalformedNumber)
        self.assertIsInstance(eval_postfix([NumberToken("inf")]).error, MalformedNumber)

    def test_empty(self):
        self.assertEqual(eval_postfix([]).value, 0.0)

    def test_unwrap(self):
        self.assertEqual(eval_postfix([NumberToken("2")]).unwrap(), 2.0)
        with self.assertRaises(InsufficientOperands):
            eval_postfix([OperatorToken("/")]).unwrap()


class TestEvaluate(unittest.TestCase):
    def test_arithmetic(self):
        self.assertEqual(evaluate("2+3*4").value, 14.0)
        self.assertEqual(evaluate("(2+3)*4").value, 20.0)
        self.assertEqual(evaluate("8-3-2").value, 3.0)
        self.assertEqual(evaluate("7/2").value, 3.5)
        self.assertAlmostEqual(evaluate("0.1+0.2").value, 0.3)
        self.assertEqual(evaluate(".5*4").value, 2.0)
        self.assertEqual(evaluate("3.").value, 3.0)

    def test_precedence_matters(self):
        self.assertNotEqual(evaluate("2+3*4").value, evaluate("(2+3)*4").value)

    def test_division_by_zero(self):
        self.assertEqual(evaluate("5/0").value, math.inf)
        self.assertEqual(evaluate("0-5/0").value, -math.inf)
        self.assertTrue(math.isnan(evaluate("0/0").value))

    def test_empty_and_parens_only(self):
        self.assertEqual(evaluate("").value, 0.0)
        self.assertEqual(evaluate("(").value, 0.0)
        self.assertEqual(evaluate("()").value, 0.0)

    def test_glyphs(self):
        self.assertEqual(evaluate("6×7").value, 42.0)
        self.assertEqual(evaluate("9÷3").value, 3.0)

    def test_leftover_operands_return_top(self):
        result = evaluate("3 4")
        self.assertEqual(result.value, 34.0)  # space is dropped, digits merge
        result = eval_postfix([NumberToken("3"), NumberToken("4")])
        self.assertEqual(result, EvalResult(4.0, None))

    def test_unary_minus_unsupported(self):
        self.assertIsInstance(evaluate("-5").error, InsufficientOperands)
        self.assertIsInstance(evaluate("2*-3").error, InsufficientOperands)

    def test_errors_returned_not_raised(self):
        self.assertIsInstance(evaluate("3.4.5+1").error, MalformedNumber)
        self.assertIsInstance(evaluate("+").error, InsufficientOperands)
        self.assertIsNone(evaluate("+").value)


if __name__ == "__main__":
    unittest.main()

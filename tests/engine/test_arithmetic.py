"""
Table Companion - Constrained Arithmetic Tests
"""

import pytest

from src.engine.arithmetic import (
    MAX_LITERAL_LENGTH,
    ArithmeticParseError,
    evaluate_arithmetic,
    tokenize,
)


class TestTokenize:
    """Tests for tokenize()."""

    def test_numbers_and_operators(self):
        assert tokenize("10/2+1") == ["10", "/", "2", "+", "1"]

    def test_whitespace_between_tokens(self):
        assert tokenize(" 3 *  4 ") == ["3", "*", "4"]

    def test_decimals(self):
        assert tokenize("1.5+.5") == ["1.5", "+", ".5"]

    @pytest.mark.parametrize("text", ["1e5", "2**3", "(1)", "abs(2)", "1.", "2%3"])
    def test_rejects_foreign_characters(self, text):
        with pytest.raises(ArithmeticParseError):
            evaluate_arithmetic(text)

    def test_empty(self):
        assert tokenize("") == []


class TestEvaluateArithmetic:
    """Tests for evaluate_arithmetic()."""

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("3", 3),
            ("2+3", 5),
            ("10-12", -2),
            ("2*3+4", 10),
            ("2+3*4", 14),
            ("20/4/5", 1),
            ("8-2-1", 5),
            ("-3", -3),
            ("--3", 3),
            ("+-3", -3),
            ("2*-3", -6),
            ("0.5*3", 1),
        ],
    )
    def test_values(self, expression, expected):
        assert evaluate_arithmetic(expression) == expected

    def test_division_floors_toward_negative_infinity(self):
        assert evaluate_arithmetic("7/2") == 3
        assert evaluate_arithmetic("-7/2") == -4

    def test_exact_until_the_end(self):
        # 1/3 * 3 is exactly 1 rather than 0.999...
        assert evaluate_arithmetic("1/3*3") == 1

    def test_division_by_zero(self):
        with pytest.raises(ArithmeticParseError, match="Division by zero"):
            evaluate_arithmetic("5/0")

    def test_empty_expression(self):
        with pytest.raises(ArithmeticParseError, match="Empty expression"):
            evaluate_arithmetic("   ")

    @pytest.mark.parametrize("expression", ["+", "3+", "3*", "-"])
    def test_dangling_operator(self, expression):
        with pytest.raises(ArithmeticParseError, match="Unexpected end"):
            evaluate_arithmetic(expression)

    @pytest.mark.parametrize("expression", ["*3", "/2", "3+*2"])
    def test_missing_left_operand(self, expression):
        with pytest.raises(ArithmeticParseError, match="missing a left operand"):
            evaluate_arithmetic(expression)

    def test_adjacent_numbers(self):
        with pytest.raises(ArithmeticParseError, match="Unexpected token"):
            evaluate_arithmetic("3 4")

    def test_long_unary_chain(self):
        assert evaluate_arithmetic("-" * 5000 + "1") == 1

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            evaluate_arithmetic("nope")

    def test_overlong_literal(self):
        with pytest.raises(ArithmeticParseError, match="longer than"):
            evaluate_arithmetic("1+" + "9" * 5000)

    def test_longest_literal_accepted(self):
        assert evaluate_arithmetic("9" * MAX_LITERAL_LENGTH) == int("9" * MAX_LITERAL_LENGTH)

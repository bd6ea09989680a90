"""
Table Companion - Base Classes Tests

Tests for dataclasses, enums, and validation utilities.
"""

import pytest
from src.engine.base import (
    INVALID_FORMULA,
    STANDARD_DICE,
    DieType,
    RollResult,
    TermKind,
    TermRoll,
)
from src.engine.validators import (
    MAX_TEAM_SIZE,
    validate_ability_selection,
    validate_disjoint_rosters,
    validate_hp,
    validate_stat,
    validate_team_members,
)


class TestDieType:
    """Tests for DieType enum."""

    def test_d6_value(self):
        assert DieType.D6.value == 6

    def test_d20_formula(self):
        assert DieType.D20.formula == "1d20"

    def test_standard_dice(self):
        assert STANDARD_DICE == (4, 6, 8, 10, 12, 20)


class TestTermRoll:
    """Tests for TermRoll dataclass."""

    def test_dice_subtotal(self):
        term = TermRoll(kind=TermKind.DICE, sign=1, values=(3, 5), count=2, sides=6)
        assert term.subtotal == 8

    def test_negative_subtotal(self):
        term = TermRoll(kind=TermKind.DICE, sign=-1, values=(3, 5), count=2, sides=6)
        assert term.subtotal == -8

    def test_render_multiple_dice(self):
        term = TermRoll(kind=TermKind.DICE, sign=1, values=(3, 5, 1), count=3, sides=6)
        assert term.render() == "(3+5+1)"

    def test_render_single_die(self):
        term = TermRoll(kind=TermKind.DICE, sign=-1, values=(4,), count=1, sides=8)
        assert term.render() == "4"

    def test_render_modifier(self):
        term = TermRoll(kind=TermKind.MODIFIER, sign=1, values=(3,))
        assert term.render() == "3"

    def test_immutable(self):
        term = TermRoll(kind=TermKind.MODIFIER, sign=1, values=(3,))
        with pytest.raises(AttributeError):
            term.sign = -1


class TestRollResult:
    """Tests for RollResult dataclass."""

    def test_invalid(self):
        result = RollResult.invalid()
        assert result.result == 0
        assert result.breakdown == INVALID_FORMULA
        assert result.terms == ()
        assert not result.is_valid

    def test_valid(self):
        assert RollResult(result=7, breakdown="7").is_valid

    def test_dice_values_skip_modifiers(self):
        result = RollResult(
            result=11,
            breakdown="(2+6)+3",
            terms=(
                TermRoll(kind=TermKind.DICE, sign=1, values=(2, 6), count=2, sides=6),
                TermRoll(kind=TermKind.MODIFIER, sign=1, values=(3,)),
            ),
        )
        assert result.dice_values == (2, 6)

    def test_str_valid(self):
        assert str(RollResult(result=11, breakdown="(2+6)+3")) == "11 [(2+6)+3]"

    def test_str_invalid(self):
        assert str(RollResult.invalid()) == INVALID_FORMULA


class TestValidators:
    """Tests for validation functions."""

    class TestValidateHp:
        def test_positive(self):
            assert validate_hp(12) == 12

        def test_zero(self):
            assert validate_hp(0) == 0

        def test_negative_clamped(self):
            assert validate_hp(-7) == 0

        def test_non_integer_raises(self):
            with pytest.raises(ValueError, match="must be an integer"):
                validate_hp(3.5)

        def test_bool_raises(self):
            with pytest.raises(ValueError, match="must be an integer"):
                validate_hp(True)

    class TestValidateStat:
        def test_valid(self):
            assert validate_stat("speed", 30) == 30

        def test_below_minimum(self):
            with pytest.raises(ValueError, match="ac must be at least 0"):
                validate_stat("ac", -1)

        def test_custom_minimum(self):
            assert validate_stat("initiative", -3, minimum=-10) == -3

        def test_non_integer(self):
            with pytest.raises(ValueError, match="hp must be an integer"):
                validate_stat("hp", "10")

    class TestValidateTeamMembers:
        def test_valid(self):
            assert validate_team_members([3, 1, 2]) == (3, 1, 2)

        def test_empty(self):
            assert validate_team_members([]) == ()

        def test_full_team(self):
            assert len(validate_team_members(range(MAX_TEAM_SIZE))) == MAX_TEAM_SIZE

        def test_too_many(self):
            with pytest.raises(ValueError, match="at most 6"):
                validate_team_members(range(7))

        def test_custom_max(self):
            with pytest.raises(ValueError, match="at most 2"):
                validate_team_members([1, 2, 3], max_size=2)

        def test_duplicate(self):
            with pytest.raises(ValueError, match="Character 2 is already on the team"):
                validate_team_members([1, 2, 2])

        def test_non_integer(self):
            with pytest.raises(ValueError, match="index 1 must be an integer"):
                validate_team_members([1, "2"])

    class TestValidateAbilitySelection:
        def test_drops_non_members(self):
            assert validate_ability_selection({1: ["a"], 9: ["b"]}, [1, 2]) == {1: ("a",)}

        def test_string_keys(self):
            assert validate_ability_selection({"2": ["x", "y"]}, [2]) == {2: ("x", "y")}

        def test_dedups_keeping_order(self):
            assert validate_ability_selection({1: ["b", "a", "b"]}, [1]) == {1: ("b", "a")}

    class TestValidateDisjointRosters:
        def test_disjoint(self):
            validate_disjoint_rosters([1, 2], [3])

        def test_overlap(self):
            with pytest.raises(ValueError, match=r"both sides: \[2, 3\]"):
                validate_disjoint_rosters([1, 2, 3], [3, 2])

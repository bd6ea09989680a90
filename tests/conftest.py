"""
Table Companion - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

from typing import Any, Callable, Sequence
from unittest.mock import MagicMock

import pytest

from src.engine.battle import BattleState, CombatantState


# =============================================================================
# RANDOM SOURCES
# =============================================================================

class FixedSequenceRandom:
    """Random source that replays a fixed list of floats, cycling at the end."""

    def __init__(self, values: Sequence[float]) -> None:
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def fixed_random() -> Callable[..., FixedSequenceRandom]:
    """Factory for a random source replaying the given floats."""
    return lambda *values: FixedSequenceRandom(values)


@pytest.fixture
def faces() -> Callable[..., FixedSequenceRandom]:
    """
    Factory for a random source that makes dice show the given faces.

    Usage: ``faces(6, 4, 2)`` rolls a 4 then a 2 on six-sided dice.
    """
    def make(sides: int, *face_values: int) -> FixedSequenceRandom:
        return FixedSequenceRandom([(f - 0.5) / sides for f in face_values])
    return make


# =============================================================================
# BATTLE STATE FIXTURES
# =============================================================================

@pytest.fixture
def two_combatant_state() -> BattleState:
    """One ally acting second, one opponent acting first."""
    return BattleState(
        allies=(CombatantState(character_id=1, current_hp=20, turn_order=2),),
        opponents=(CombatantState(character_id=2, current_hp=15, turn_order=1),),
    )


@pytest.fixture
def skirmish_state() -> BattleState:
    """Three allies and two opponents with gaps and a tie in turn order."""
    return BattleState(
        allies=(
            CombatantState(character_id=10, current_hp=30, status="", turn_order=5),
            CombatantState(character_id=11, current_hp=12, status="Blessed", turn_order=1),
            CombatantState(character_id=12, current_hp=8, status="", turn_order=9),
        ),
        opponents=(
            CombatantState(character_id=20, current_hp=7, status="", turn_order=5),
            CombatantState(character_id=21, current_hp=40, status="Enraged", turn_order=3),
        ),
    )


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def mock_client() -> MagicMock:
    """Mock Supabase client; every table() call returns the same table mock."""
    return MagicMock()


@pytest.fixture
def character_row() -> dict[str, Any]:
    """A `characters` row as returned by PostgREST."""
    return {
        "id": 1,
        "owner_id": "alice",
        "name": "Brakka",
        "hp": 24,
        "speed": 30,
        "ac": 15,
        "initiative": 2,
        "tags": "fighter,dwarf",
        "abilities": [
            {
                "id": "a1b2c3d4",
                "name": "Greataxe",
                "description": "Heavy two-handed swing",
                "damage": "1d12+3",
                "range": "5 ft",
                "effect": None,
                "is_passive": False,
            },
        ],
        "is_public": False,
        "created_at": "2024-05-01T12:00:00+00:00",
    }


@pytest.fixture
def team_row() -> dict[str, Any]:
    """A `teams` row; JSON object keys come back as strings."""
    return {
        "id": 3,
        "owner_id": "alice",
        "name": "Party",
        "character_ids": [1, 2],
        "character_abilities": {"1": ["a1b2c3d4"]},
        "created_at": "2024-05-01T12:00:00+00:00",
    }


@pytest.fixture
def battle_row() -> dict[str, Any]:
    """A `battles` row with a stored battle state blob."""
    return {
        "id": 7,
        "owner_id": "alice",
        "name": "Goblin Ambush",
        "team_id": 3,
        "opponent_team_id": 4,
        "current_turn": 4,
        "battle_state": {
            "allies": [{"character_id": 1, "current_hp": 20, "status": "", "turn_order": 2}],
            "opponents": [{"character_id": 2, "current_hp": 0, "status": "Down", "turn_order": 1}],
        },
        "created_at": "2024-05-01T12:00:00+00:00",
    }

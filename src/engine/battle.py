"""
Table Companion - Battle Turn Engine

Tracks two rosters of combatants and derives the active combatant from a
global turn counter. The active combatant is never stored: it is a pure
function of (rosters, current_turn) and is recomputed on every read.

All methods are stateless class methods operating on immutable data.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping, Protocol, Sequence, TypeVar

from src.engine.validators import validate_disjoint_rosters, validate_hp

T = TypeVar("T")


class Side(Enum):
    """Which roster a combatant fights on."""
    ALLIES = "allies"
    OPPONENTS = "opponents"


class CharacterTemplate(Protocol):
    """Fields the engine reads from a character when starting a battle."""
    id: int
    hp: int
    initiative: int


@dataclass(frozen=True)
class CombatantState:
    """
    Battle-scoped state of one combatant.

    Attributes:
        character_id: Id of the character template this entry refers to
        current_hp: Hit points in this battle (never negative, may exceed max)
        status: Free-text condition label ("Poisoned", "Prone", ...)
        turn_order: Initiative position for this battle; need not be contiguous
    """
    character_id: int
    current_hp: int
    status: str = ""
    turn_order: int = 0

    def __post_init__(self) -> None:
        if self.current_hp < 0:
            raise ValueError(
                f"Combatant {self.character_id} has negative HP {self.current_hp}."
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "character_id": self.character_id,
            "current_hp": self.current_hp,
            "status": self.status,
            "turn_order": self.turn_order,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CombatantState":
        return cls(
            character_id=int(data["character_id"]),
            current_hp=int(data["current_hp"]),
            status=str(data.get("status") or ""),
            turn_order=int(data.get("turn_order", 0)),
        )


@dataclass(frozen=True)
class BattleState:
    """
    Both rosters of a battle.

    Attributes:
        allies: The player's side, in roster order
        opponents: The opposing side, in roster order
    """
    allies: tuple[CombatantState, ...] = field(default_factory=tuple)
    opponents: tuple[CombatantState, ...] = field(default_factory=tuple)

    def roster(self, side: Side) -> tuple[CombatantState, ...]:
        return self.allies if side == Side.ALLIES else self.opponents

    @property
    def combatants(self) -> tuple[CombatantState, ...]:
        """Allies followed by opponents, unsorted."""
        return self.allies + self.opponents

    def __len__(self) -> int:
        return len(self.allies) + len(self.opponents)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Plain structure stored verbatim by the persistence layer."""
        return {
            Side.ALLIES.value: [c.to_dict() for c in self.allies],
            Side.OPPONENTS.value: [c.to_dict() for c in self.opponents],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "BattleState":
        data = data or {}
        return cls(
            allies=tuple(CombatantState.from_dict(c) for c in data.get(Side.ALLIES.value) or ()),
            opponents=tuple(
                CombatantState.from_dict(c) for c in data.get(Side.OPPONENTS.value) or ()
            ),
        )


class BattleTurnEngine:
    """
    Stateless engine for battle rosters and turn order.

    All methods are class methods operating on immutable data.
    State is passed in and returned, never stored.
    """

    STARTING_TURN = 1

    @classmethod
    def advance_turn(cls, current_turn: int) -> int:
        """Move the global turn counter forward by exactly one."""
        return current_turn + 1

    @classmethod
    def initiative_order(cls, state: BattleState) -> tuple[CombatantState, ...]:
        """All combatants sorted by ascending turn order.

        The sort is stable: ties keep allies-then-opponents roster order.
        """
        return tuple(sorted(state.combatants, key=lambda c: c.turn_order))

    @classmethod
    def active_index(cls, state: BattleState, current_turn: int) -> int | None:
        """Index into initiative_order() of the combatant whose turn it is."""
        total = len(state)
        if total == 0:
            return None
        return (current_turn - 1) % total

    @classmethod
    def active_combatant(
        cls,
        state: BattleState,
        current_turn: int,
    ) -> CombatantState | None:
        """Return the combatant whose turn it is, or None for an empty battle."""
        index = cls.active_index(state, current_turn)
        if index is None:
            return None
        return cls.initiative_order(state)[index]

    @classmethod
    def update_combatant(
        cls,
        state: BattleState,
        side: Side,
        character_id: int,
        *,
        current_hp: int | None = None,
        status: str | None = None,
    ) -> BattleState:
        """Apply a partial update to one combatant on one side.

        Negative HP is clamped to 0. Roster order is preserved. If no entry
        on ``side`` has ``character_id`` the original state is returned.

        Args:
            state: Current battle state
            side: Roster to search
            character_id: Combatant to update
            current_hp: New hit points, if changing
            status: New status label, if changing

        Returns:
            A new BattleState (or ``state`` itself when nothing matched)
        """
        roster = state.roster(side)
        if not any(c.character_id == character_id for c in roster):
            return state

        changes: dict[str, Any] = {}
        if current_hp is not None:
            changes["current_hp"] = validate_hp(current_hp)
        if status is not None:
            changes["status"] = status
        if not changes:
            return state

        updated = tuple(
            replace(c, **changes) if c.character_id == character_id else c
            for c in roster
        )
        return replace(state, **{side.value: updated})

    @classmethod
    def adjust_hp(
        cls,
        state: BattleState,
        side: Side,
        character_id: int,
        delta: int,
    ) -> BattleState:
        """Add ``delta`` to a combatant's HP, never dropping below 0."""
        combatant = next((c for c in state.roster(side) if c.character_id == character_id), None)
        if combatant is None:
            return state
        return cls.update_combatant(
            state, side, character_id, current_hp=max(0, combatant.current_hp + delta)
        )

    @classmethod
    def side_of(cls, state: BattleState, character_id: int) -> Side | None:
        """Report which roster contains ``character_id``."""
        for side in (Side.ALLIES, Side.OPPONENTS):
            if any(c.character_id == character_id for c in state.roster(side)):
                return side
        return None

    @classmethod
    def find_combatant(cls, state: BattleState, character_id: int) -> CombatantState | None:
        return next((c for c in state.combatants if c.character_id == character_id), None)

    @classmethod
    def build_state(
        cls,
        allies: Sequence[CharacterTemplate],
        opponents: Sequence[CharacterTemplate],
    ) -> BattleState:
        """Start a battle from two lists of character templates.

        Every combatant starts at full HP with no status. Turn order runs
        1..N by descending initiative; ties go to allies, then roster position.

        Raises:
            ValueError: If a character appears on both sides
        """
        validate_disjoint_rosters(
            [c.id for c in allies], [c.id for c in opponents]
        )

        entries = [(Side.ALLIES, c) for c in allies] + [(Side.OPPONENTS, c) for c in opponents]
        ranked = sorted(range(len(entries)), key=lambda i: -entries[i][1].initiative)
        turn_orders = {index: rank for rank, index in enumerate(ranked, 1)}

        built: dict[Side, list[CombatantState]] = {Side.ALLIES: [], Side.OPPONENTS: []}
        for index, (side, character) in enumerate(entries):
            built[side].append(CombatantState(
                character_id=character.id,
                current_hp=max(0, character.hp),
                turn_order=turn_orders[index],
            ))

        return BattleState(
            allies=tuple(built[Side.ALLIES]),
            opponents=tuple(built[Side.OPPONENTS]),
        )

    @classmethod
    def pair_with_templates(
        cls,
        roster: Iterable[CombatantState],
        templates: Mapping[int, T],
    ) -> list[tuple[CombatantState, T | None]]:
        """Match roster entries to their templates by id.

        Entries whose template was deleted pair with None; callers skip them.
        """
        return [(c, templates.get(c.character_id)) for c in roster]

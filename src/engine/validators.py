"""
Table Companion - Input Validation Utilities

Provides validation functions for engine and editor inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

from typing import Iterable, Mapping, Sequence

MAX_TEAM_SIZE = 6


def validate_hp(value: int) -> int:
    """
    Validate a hit point value, clamping negatives to zero.

    Args:
        value: Requested hit points

    Returns:
        ``value`` or 0 if it was negative

    Raises:
        ValueError: If value is not an integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"HP must be an integer, got {type(value).__name__}.")
    return max(0, value)


def validate_stat(name: str, value: int, minimum: int = 0) -> int:
    """
    Validate a character statistic (hp, speed, ac, initiative).

    Args:
        name: Statistic name used in the error message
        value: Value to validate
        minimum: Smallest allowed value

    Returns:
        Validated value

    Raises:
        ValueError: If value is not an integer or below ``minimum``
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}.")

    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}.")

    return value


def validate_team_members(
    character_ids: Sequence[int],
    max_size: int = MAX_TEAM_SIZE,
) -> tuple[int, ...]:
    """
    Validate a team roster.

    Args:
        character_ids: Character ids in roster order
        max_size: Largest allowed team

    Returns:
        Validated ids as a tuple, order preserved

    Raises:
        ValueError: On non-integer ids, duplicates, or too many members
    """
    ids = tuple(character_ids)

    for i, cid in enumerate(ids):
        if isinstance(cid, bool) or not isinstance(cid, int):
            raise ValueError(f"Character id at index {i} must be an integer, got {type(cid).__name__}.")

    if len(ids) > max_size:
        raise ValueError(f"A team holds at most {max_size} characters, got {len(ids)}.")

    seen: set[int] = set()
    for cid in ids:
        if cid in seen:
            raise ValueError(f"Character {cid} is already on the team.")
        seen.add(cid)

    return ids


def validate_ability_selection(
    selection: Mapping[int, Iterable[str]],
    character_ids: Iterable[int],
) -> dict[int, tuple[str, ...]]:
    """
    Normalise the per-member ability selection of a team.

    Entries for characters not on the team are dropped; duplicate ability
    ids are removed keeping first occurrence.
    """
    members = set(character_ids)
    return {
        int(cid): tuple(dict.fromkeys(ability_ids))
        for cid, ability_ids in selection.items()
        if int(cid) in members
    }


def validate_disjoint_rosters(
    allies_ids: Iterable[int],
    opponents_ids: Iterable[int],
) -> None:
    """
    Ensure no character fights on both sides.

    Raises:
        ValueError: Naming every id present in both rosters
    """
    overlap = set(allies_ids) & set(opponents_ids)
    if overlap:
        raise ValueError(
            f"Characters cannot be on both sides: {sorted(overlap)}."
        )

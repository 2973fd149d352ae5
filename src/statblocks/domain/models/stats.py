from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


ABILITIES: tuple[str, ...] = (
    "strength",
    "dexterity",
    "constitution",
    "intelligence",
    "wisdom",
    "charisma",
)

ABILITY_ALIASES: dict[str, str] = {
    "str": "strength",
    "strength": "strength",
    "dex": "dexterity",
    "dexterity": "dexterity",
    "con": "constitution",
    "constitution": "constitution",
    "int": "intelligence",
    "intelligence": "intelligence",
    "wis": "wisdom",
    "wisdom": "wisdom",
    "cha": "charisma",
    "charisma": "charisma",
}

_SAVE_SUFFIXES = (" saving throw", " save")


def ability_modifier(score: int | float | None) -> int:
    try:
        return int((int(score) - 10) // 2)
    except (TypeError, ValueError, OverflowError):
        return 0


def normalize_ability_name(value: Any) -> str | None:
    if value is None or value == "":
        return None
    key = " ".join(str(value).strip().lower().split())
    for suffix in _SAVE_SUFFIXES:
        if key.endswith(suffix):
            key = key[: -len(suffix)].rstrip()
            break
    return ABILITY_ALIASES.get(key)


@dataclass(frozen=True)
class AbilityScores:
    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10

    def score(self, ability: str | None) -> int:
        name = normalize_ability_name(ability)
        if name is None:
            return 10
        return getattr(self, name)

    def modifier(self, ability: str | None) -> int:
        """Modifier for ``ability``; unknown names contribute nothing."""

        if normalize_ability_name(ability) is None:
            return 0
        return ability_modifier(self.score(ability))

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in ABILITIES}


def ability_scores_from_stats(stats: Any) -> AbilityScores:
    """Read the positional ``stats`` array of a creature record.

    Positions map 1:1 to :data:`ABILITIES`; anything that is not a number keeps
    the default score of 10.
    """

    values = stats if isinstance(stats, (list, tuple)) else []
    scores: dict[str, int] = {}
    for index, ability in enumerate(ABILITIES):
        if index >= len(values):
            break
        raw = values[index]
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            continue
        scores[ability] = raw
    return AbilityScores(**scores)


def ability_scores_from_mapping(attributes: Mapping[str, Any] | None) -> AbilityScores:
    attrs = attributes or {}
    scores: dict[str, int] = {}
    for key, raw in attrs.items():
        ability = normalize_ability_name(key)
        if ability is None or isinstance(raw, bool) or not isinstance(raw, (int, float)):
            continue
        scores[ability] = raw
    return AbilityScores(**scores)

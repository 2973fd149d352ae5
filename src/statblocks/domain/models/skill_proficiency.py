from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from statblocks.domain.models.stats import normalize_ability_name


@dataclass(frozen=True)
class SkillDefinition:
    label: str
    ability: str


SKILL_CATALOG: tuple[SkillDefinition, ...] = (
    SkillDefinition(label="athletics", ability="strength"),
    SkillDefinition(label="acrobatics", ability="dexterity"),
    SkillDefinition(label="sleight of hand", ability="dexterity"),
    SkillDefinition(label="stealth", ability="dexterity"),
    SkillDefinition(label="arcana", ability="intelligence"),
    SkillDefinition(label="history", ability="intelligence"),
    SkillDefinition(label="investigation", ability="intelligence"),
    SkillDefinition(label="nature", ability="intelligence"),
    SkillDefinition(label="religion", ability="intelligence"),
    SkillDefinition(label="animal handling", ability="wisdom"),
    SkillDefinition(label="insight", ability="wisdom"),
    SkillDefinition(label="medicine", ability="wisdom"),
    SkillDefinition(label="perception", ability="wisdom"),
    SkillDefinition(label="survival", ability="wisdom"),
    SkillDefinition(label="deception", ability="charisma"),
    SkillDefinition(label="intimidation", ability="charisma"),
    SkillDefinition(label="performance", ability="charisma"),
    SkillDefinition(label="persuasion", ability="charisma"),
)

SKILL_TO_ABILITY: dict[str, str] = {row.label: row.ability for row in SKILL_CATALOG}


def normalize_skill_label(value: Any) -> str:
    if value is None or value == "":
        return ""
    return " ".join(str(value).strip().lower().split())


def ability_for_skill(label: str, override: Any = None) -> str | None:
    """Ability governing ``label``; a recognised ``override`` takes precedence."""

    if isinstance(override, str) and override:
        normalized = normalize_ability_name(override)
        if normalized is not None:
            return normalized
    return SKILL_TO_ABILITY.get(normalize_skill_label(label))

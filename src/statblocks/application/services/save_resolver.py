"""Saving throw and skill bonus computation.

Entries of the ``saves`` and ``skillsaves`` fields come in several shapes:

* a bare name (``"dex"``, ``"perception"``), computed as proficient;
* a legacy single-key number (``{"str": 5}``), kept as written;
* a descriptive entry (``{"name": ..., "desc": ...}``), kept as written;
* a structured entry (``{"skill": "stealth", "expertise": true}`` or
  ``{"save": "wis", "bonus": 1}``), computed from ability scores and the
  proficiency bonus.

Anything that cannot be resolved is returned unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping

from statblocks.application.services.balance_tables import proficiency_bonus_for_challenge_rating
from statblocks.application.services.value_normalizer import to_boolean, to_number
from statblocks.domain.models.creature import UNRESOLVABLE_LABEL, Diagnostic
from statblocks.domain.models.skill_proficiency import ability_for_skill, normalize_skill_label
from statblocks.domain.models.stats import (
    AbilityScores,
    ability_scores_from_mapping,
    ability_scores_from_stats,
    normalize_ability_name,
)


SAVING_LIKE_FIELDS = ("saves", "skillsaves")
SKILL_FIELD = "skillsaves"

_BONUS_FIELDS = ("bonus", "mod", "modifier", "adjustment")
_MULTIPLIER_FIELDS = ("proficiencyMultiplier", "multiplier")
_PROFICIENCY_FIELDS = ("proficiencyBonus", "pb")
_HALF_PROFICIENCY_FLAGS = ("half", "halfProficient", "halfProficiency")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComputedEntrySpec:
    proficient: bool = True
    expertise: bool = False
    multiplier: float | None = None
    bonus: float = 0

    @property
    def effective_multiplier(self) -> float:
        if self.multiplier is not None:
            return self.multiplier
        if self.expertise:
            return 2
        if self.proficient is False:
            return 0
        return 1


def _as_scores(ability_scores: AbilityScores | Mapping[str, Any] | None) -> AbilityScores:
    if isinstance(ability_scores, AbilityScores):
        return ability_scores
    return ability_scores_from_mapping(ability_scores)


def resolve(
    label: str,
    ability: str | None,
    ability_scores: AbilityScores | Mapping[str, Any] | None,
    proficiency_bonus: float,
    spec: ComputedEntrySpec | Mapping[str, Any] | None = None,
) -> dict[str, int | float]:
    if isinstance(spec, Mapping):
        spec = spec_from_entry(spec)
    spec = spec or ComputedEntrySpec()
    scores = _as_scores(ability_scores)
    ability_mod = scores.modifier(ability) if ability is not None else 0
    proficiency = proficiency_bonus * spec.effective_multiplier
    total = ability_mod + proficiency + (spec.bonus or 0)
    if isinstance(total, float) and total.is_integer():
        total = int(total)
    return {label: total}


def _first_number(entry: Mapping[str, Any], fields: tuple[str, ...]) -> int | float | None:
    for name in fields:
        value = to_number(entry.get(name))
        if value is not None:
            return value
    return None


def _first_present(entry: Mapping[str, Any], fields: tuple[str, ...]) -> Any:
    for name in fields:
        value = entry.get(name)
        if value is not None:
            return value
    return None


def extract_multiplier(entry: Mapping[str, Any]) -> float | None:
    multiplier = to_number(_first_present(entry, _MULTIPLIER_FIELDS))
    if multiplier is not None:
        return multiplier
    if any(entry.get(flag) is True for flag in _HALF_PROFICIENCY_FLAGS):
        return 0.5
    return None


def extract_bonus(entry: Mapping[str, Any]) -> int | float:
    value = _first_number(entry, _BONUS_FIELDS)
    return value if value is not None else 0


def resolve_proficiency(entry: Mapping[str, Any], fallback: float) -> float:
    override = to_number(_first_present(entry, _PROFICIENCY_FIELDS))
    return override if override is not None else fallback


def spec_from_entry(entry: Mapping[str, Any]) -> ComputedEntrySpec:
    return ComputedEntrySpec(
        proficient=to_boolean(entry.get("proficient"), True),
        expertise=to_boolean(entry.get("expertise"), False),
        multiplier=extract_multiplier(entry),
        bonus=extract_bonus(entry),
    )


def legacy_entry(entry: Mapping[str, Any]) -> dict[str, int | float] | None:
    if len(entry) != 1:
        return None
    ((key, raw),) = entry.items()
    value = to_number(raw)
    if value is None:
        return None
    return {key: value}


def _report(diagnostics: List[Diagnostic] | None, field: str | None, label: Any) -> None:
    logger.debug("Save entry left as written", extra={"field": field, "label": label})
    if diagnostics is not None:
        diagnostics.append(
            Diagnostic(kind=UNRESOLVABLE_LABEL, message=f"Could not resolve an ability for {label!r}", field=field)
        )


def normalize_save_entry(
    entry: Any,
    is_skill: bool,
    ability_scores: AbilityScores,
    proficiency_bonus: float,
    *,
    diagnostics: List[Diagnostic] | None = None,
    field: str | None = None,
) -> Any:
    if entry is None:
        return entry

    if isinstance(entry, str):
        if is_skill:
            label = normalize_skill_label(entry)
            ability = ability_for_skill(label) if label else None
            if ability is None:
                _report(diagnostics, field, entry)
                return entry
            return resolve(label, ability, ability_scores, proficiency_bonus)
        ability = normalize_ability_name(entry)
        if ability is None:
            _report(diagnostics, field, entry)
            return entry
        return resolve(ability, ability, ability_scores, proficiency_bonus)

    if not isinstance(entry, Mapping):
        return entry
    if entry.get("desc"):
        return entry

    legacy = legacy_entry(entry)
    if legacy is not None:
        return legacy

    if is_skill and "skill" in entry:
        label = normalize_skill_label(entry.get("skill"))
        if not label:
            return entry
        ability = ability_for_skill(label, entry.get("ability"))
        if ability is None:
            _report(diagnostics, field, entry.get("skill"))
            return entry
        return resolve(
            label,
            ability,
            ability_scores,
            resolve_proficiency(entry, proficiency_bonus),
            spec_from_entry(entry),
        )

    if not is_skill and ("ability" in entry or "save" in entry):
        ability = normalize_ability_name(entry.get("ability")) or normalize_ability_name(entry.get("save"))
        if ability is None:
            _report(diagnostics, field, entry.get("ability", entry.get("save")))
            return entry
        return resolve(
            ability,
            ability,
            ability_scores,
            resolve_proficiency(entry, proficiency_bonus),
            spec_from_entry(entry),
        )

    return entry


def normalize_saving_like_entries(
    property_name: str,
    entries: List[Any],
    creature: Mapping[str, Any],
    *,
    diagnostics: List[Diagnostic] | None = None,
) -> List[Any]:
    ability_scores = ability_scores_from_stats(creature.get("stats"))
    proficiency = proficiency_bonus_for_challenge_rating(creature.get("cr"))
    is_skill = property_name == SKILL_FIELD
    return [
        normalize_save_entry(
            entry,
            is_skill,
            ability_scores,
            proficiency,
            diagnostics=diagnostics,
            field=property_name,
        )
        for entry in entries
    ]

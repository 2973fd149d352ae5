from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Sequence

from statblocks.application.services.save_resolver import SAVING_LIKE_FIELDS, normalize_saving_like_entries
from statblocks.application.services.trait_merger import merge_traits
from statblocks.application.services.value_normalizer import append_values
from statblocks.domain.models.creature import (
    MALFORMED_FIELD,
    CreatureRecord,
    Diagnostic,
    FieldSlots,
    additive_key,
    subtractive_key,
)
from statblocks.domain.models.layout import FieldDeclaration, FieldPolicy


def single_key_entries(value: Mapping[str, Any]) -> List[dict[str, Any]]:
    return [{key: item} for key, item in value.items()]


class FieldMergeService:
    """Applies the merge policy of every layout-declared field to a record."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def apply(
        self,
        record: CreatureRecord,
        declarations: Iterable[FieldDeclaration],
        extensions: Sequence[Mapping[str, Any]],
        diagnostics: List[Diagnostic] | None = None,
    ) -> CreatureRecord:
        # Oldest ancestor first so nearer definitions replace older ones.
        sources = list(reversed(extensions)) if extensions else [dict(record)]
        for declaration in declarations:
            slots = FieldSlots.read(record, declaration.name)
            if slots.is_absent:
                continue
            if declaration.policy is FieldPolicy.TRAITS:
                self._merge_traits(record, slots, sources)
            elif declaration.policy is FieldPolicy.SAVES:
                self._merge_saves(record, slots, diagnostics)
            else:
                self._merge_additive(record, slots)
            record.pop(additive_key(declaration.name), None)
            record.pop(subtractive_key(declaration.name), None)
        return record

    def _merge_traits(self, record: CreatureRecord, slots: FieldSlots, sources: Sequence[Mapping[str, Any]]) -> None:
        record[slots.name] = merge_traits(slots.name, sources)

    def _merge_saves(self, record: CreatureRecord, slots: FieldSlots, diagnostics: List[Diagnostic] | None) -> None:
        name = slots.name
        saves: Any = slots.direct if slots.has_direct and slots.direct is not None else []
        if isinstance(saves, Mapping):
            saves = single_key_entries(saves)

        additive: List[Any] = []
        if isinstance(slots.additive, Mapping):
            additive = single_key_entries(slots.additive)
        elif isinstance(slots.additive, list):
            additive = list(slots.additive)
        elif slots.has_additive and slots.additive is not None:
            self._malformed(diagnostics, name, f"Ignoring additive value of type {type(slots.additive).__name__}")
        if additive:
            saves = append_values(saves, additive)

        if name in SAVING_LIKE_FIELDS and isinstance(saves, list):
            saves = normalize_saving_like_entries(name, saves, record, diagnostics=diagnostics)
        record[name] = saves

    def _merge_additive(self, record: CreatureRecord, slots: FieldSlots) -> None:
        if not slots.has_additive:
            return
        if not slots.has_direct:
            record[slots.name] = slots.additive
            return
        combined = append_values(slots.direct, slots.additive)
        if combined:
            record[slots.name] = combined

    def _malformed(self, diagnostics: List[Diagnostic] | None, field: str, message: str) -> None:
        self._logger.info(message, extra={"field": field})
        if diagnostics is not None:
            diagnostics.append(Diagnostic(kind=MALFORMED_FIELD, message=message, field=field))

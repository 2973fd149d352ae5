from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Dict, Iterable, List, Optional, Set

from statblocks.application.services.value_normalizer import flatten
from statblocks.domain.models.creature import ABSENT_EXTENSION, CYCLIC_EXTENSION, CreatureRecord, Diagnostic
from statblocks.domain.repositories import CreatureRegistry


def extension_targets(record: CreatureRecord) -> List[str]:
    """Names listed under ``extends``; a single name or a (nested) list of names."""

    raw = record.get("extends")
    if isinstance(raw, str):
        return [raw] if raw else []
    if not isinstance(raw, list):
        return []
    return [name for name in flatten(raw) if isinstance(name, str) and name]


class InMemoryBestiary(CreatureRegistry):
    def __init__(self, creatures: Iterable[CreatureRecord] | Dict[str, CreatureRecord] | None = None) -> None:
        self._creatures: Dict[str, CreatureRecord] = {}
        self._logger = logging.getLogger(__name__)
        rows = creatures.values() if isinstance(creatures, dict) else (creatures or [])
        for creature in rows:
            self.add(creature)

    def add(self, creature: CreatureRecord) -> None:
        name = creature.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Creature records need a non-empty 'name'")
        self._creatures[name] = deepcopy(dict(creature))

    def remove(self, name: str) -> bool:
        return self._creatures.pop(name, None) is not None

    def list_names(self) -> List[str]:
        return sorted(self._creatures.keys())

    def get(self, name: Any) -> Optional[CreatureRecord]:
        if not isinstance(name, str):
            return None
        creature = self._creatures.get(name)
        return deepcopy(creature) if creature is not None else None

    def has_creature(self, name: Any) -> bool:
        return isinstance(name, str) and name in self._creatures

    def get_extensions(
        self,
        record: CreatureRecord,
        visited: Set[str],
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> List[CreatureRecord]:
        return self._walk(record, visited, set(), diagnostics)

    def _walk(
        self,
        record: CreatureRecord,
        visited: Set[str],
        path: Set[str],
        diagnostics: Optional[List[Diagnostic]],
    ) -> List[CreatureRecord]:
        # ``path`` holds the names being resolved right now; ``visited`` every name already merged.
        extensions: List[CreatureRecord] = [deepcopy(record)]
        own_name = record.get("name")
        on_path = set(path)
        if isinstance(own_name, str) and own_name:
            visited.add(own_name)
            on_path.add(own_name)
        for target in extension_targets(record):
            if target in on_path:
                self._report(diagnostics, CYCLIC_EXTENSION, f"Extension {target!r} extends itself; skipping")
                continue
            if target in visited:
                continue
            visited.add(target)
            ancestor = self.get(target)
            if ancestor is None:
                self._report(diagnostics, ABSENT_EXTENSION, f"Extension {target!r} is not in the bestiary")
                continue
            extensions.extend(self._walk(ancestor, visited, on_path, diagnostics))
        return extensions

    def get_extension_names(self, record: CreatureRecord, visited: Set[str]) -> List[str]:
        own_name = record.get("name")
        names: List[str] = []
        if isinstance(own_name, str) and own_name:
            names.append(own_name)
            visited.add(own_name)
        for target in extension_targets(record):
            if target in visited:
                continue
            visited.add(target)
            ancestor = self._creatures.get(target)
            if ancestor is None:
                continue
            names.extend(self.get_extension_names(ancestor, visited))
        return names

    def _report(self, diagnostics: Optional[List[Diagnostic]], kind: str, message: str) -> None:
        self._logger.info(message, extra={"diagnostic": kind})
        if diagnostics is not None:
            diagnostics.append(Diagnostic(kind=kind, message=message, field="extends"))

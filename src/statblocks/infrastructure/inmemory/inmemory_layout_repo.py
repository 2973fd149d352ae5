from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from statblocks.domain.models.layout import Layout
from statblocks.domain.repositories import LayoutRepository


DEFAULT_LAYOUT_NAME = "Basic 5e Layout"


class LayoutNotFoundError(KeyError):
    pass


def _block(block_type: str, *properties: str, **extra: Any) -> Dict[str, Any]:
    return {"type": block_type, "properties": list(properties), **extra}


BASIC_5E_LAYOUT = Layout(
    name=DEFAULT_LAYOUT_NAME,
    id="basic-5e-layout",
    blocks=[
        {
            "type": "group",
            "nested": [
                _block("heading", "name"),
                _block("subheading", "size", "type", "subtype", "alignment"),
            ],
        },
        {
            "type": "group",
            "nested": [
                _block("property", "ac"),
                _block("property", "hp"),
                _block("property", "speed"),
            ],
        },
        _block("table", "stats"),
        {
            "type": "group",
            "nested": [
                _block("saves", "saves"),
                _block("saves", "skillsaves"),
                _block("text", "damage_vulnerabilities"),
                _block("text", "damage_resistances"),
                _block("text", "damage_immunities"),
                _block("text", "condition_immunities"),
                _block("text", "senses"),
                _block("text", "languages"),
                {
                    "type": "inline",
                    "nested": [
                        _block("text", "cr"),
                        _block("text", "pb"),
                    ],
                },
            ],
        },
        _block("traits", "traits"),
        _block("spells", "spells"),
        {
            "type": "collapse",
            "nested": [
                _block("traits", "actions"),
                _block("traits", "bonus_actions"),
                _block("traits", "reactions"),
                _block("traits", "legendary_actions"),
                _block("traits", "mythic_actions"),
                _block("traits", "lair_actions"),
            ],
        },
        {"type": "ifelse", "conditions": []},
        {"type": "javascript", "code": ""},
    ],
)


class InMemoryLayoutRepository(LayoutRepository):
    def __init__(self, layouts: Iterable[Layout | Mapping[str, Any]] | None = None, default_name: str | None = None) -> None:
        self._layouts: List[Layout] = []
        for layout in layouts or []:
            self.add(layout)
        if not any(layout.name == DEFAULT_LAYOUT_NAME for layout in self._layouts):
            self._layouts.append(BASIC_5E_LAYOUT)
        self._default_name = default_name or DEFAULT_LAYOUT_NAME

    def add(self, layout: Layout | Mapping[str, Any]) -> Layout:
        row = layout if isinstance(layout, Layout) else Layout.from_mapping(layout)
        self._layouts = [existing for existing in self._layouts if existing.name != row.name]
        self._layouts.append(row)
        return row

    def get_all(self) -> List[Layout]:
        return list(self._layouts)

    def get_default(self) -> Layout:
        layout = self.find(self._default_name)
        if layout is not None:
            return layout
        return self.find(DEFAULT_LAYOUT_NAME) or BASIC_5E_LAYOUT

    def get(self, name: str) -> Layout:
        layout = self.find(name)
        if layout is None:
            raise LayoutNotFoundError(name)
        return layout

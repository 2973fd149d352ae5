from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from statblocks.domain.models.creature import additive_key, subtractive_key


def trait_from_entry(entry: Any) -> dict[str, Any] | None:
    """Traits are ``{"name", "desc"}`` mappings or ``[name, *desc_parts]`` lists."""

    if isinstance(entry, Mapping):
        return dict(entry) if "name" in entry else None
    if isinstance(entry, (list, tuple)) and len(entry) >= 1:
        return {"name": entry[0], "desc": "".join(str(part) for part in entry[1:])}
    return None


def traits_list(source: Mapping[str, Any], key: str) -> List[dict[str, Any]]:
    value = source.get(key)
    if not isinstance(value, list):
        return []
    traits: List[dict[str, Any]] = []
    for entry in value:
        trait = trait_from_entry(entry)
        if trait is not None:
            traits.append(trait)
    return traits


def removed_trait_names(source: Mapping[str, Any], key: str) -> List[Any]:
    value = source.get(key)
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        return []
    names: List[Any] = []
    for entry in value:
        if isinstance(entry, str):
            names.append(entry)
            continue
        trait = trait_from_entry(entry)
        if trait is not None:
            names.append(trait["name"])
    return names


def _trait_key(name: Any) -> Any:
    try:
        hash(name)
    except TypeError:
        return repr(name)
    return name


def merge_traits(property_name: str, ordered_sources: Iterable[Mapping[str, Any]]) -> List[dict[str, Any]]:
    """Resolve one traits field across sources, later sources taking precedence.

    Direct traits (``F``) are keyed by name so a later source replaces an
    earlier definition. Subtractive names (``F-``) then drop direct traits
    gathered so far. Additive traits (``F+``) are always kept, in the order
    found, and cannot be subtracted.
    """

    by_name: Dict[Any, dict[str, Any]] = {}
    additive: List[dict[str, Any]] = []

    for source in ordered_sources:
        if not isinstance(source, Mapping):
            continue
        for trait in traits_list(source, property_name):
            by_name[_trait_key(trait["name"])] = trait
        for name in removed_trait_names(source, subtractive_key(property_name)):
            by_name.pop(_trait_key(name), None)
        additive.extend(traits_list(source, additive_key(property_name)))

    return [*by_name.values(), *additive]

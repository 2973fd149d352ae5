from __future__ import annotations

import logging
from typing import List

import yaml

from statblocks.domain.models.creature import LINK_TRANSFORM, CreatureRecord, Diagnostic
from statblocks.domain.repositories import LinkTransformer


logger = logging.getLogger(__name__)


def dump_record(record: CreatureRecord) -> str:
    return yaml.safe_dump(record, sort_keys=False, allow_unicode=True, width=float("inf"))


def transform_links(
    record: CreatureRecord,
    transformer: LinkTransformer | None,
    diagnostics: List[Diagnostic] | None = None,
) -> CreatureRecord:
    """Round-trip ``record`` through YAML so ``transformer`` can rewrite link syntax.

    A record that cannot be serialised, or whose rewritten text no longer
    parses to a mapping, is returned unchanged.
    """

    if transformer is None:
        return record
    try:
        rewritten = transformer.transform(dump_record(record))
        parsed = yaml.safe_load(rewritten)
    except yaml.YAMLError as exc:
        return _unchanged(record, f"Link transformation skipped: {exc}", diagnostics)
    if not isinstance(parsed, dict):
        return _unchanged(record, "Link transformation did not produce a mapping", diagnostics)
    return parsed


def _unchanged(record: CreatureRecord, message: str, diagnostics: List[Diagnostic] | None) -> CreatureRecord:
    logger.info(message, extra={"creature": record.get("name")})
    if diagnostics is not None:
        diagnostics.append(Diagnostic(kind=LINK_TRANSFORM, message=message))
    return record

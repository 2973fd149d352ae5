"""Resolve a creature from the configured bestiary and print it.

Usage examples:
    python -m statblocks "Goblin Boss"
    python -m statblocks --params '{"creature": "Goblin", "name": "Snik", "traits-": ["Nimble Escape"]}'
    python -m statblocks Goblin --bestiary data/bestiary --format json --diagnostics
"""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from statblocks.application.services.link_transform_service import dump_record
from statblocks.bootstrap import create_creature_builder, create_registry
from statblocks.domain.models.creature import BuildResult


_CONSOLE = Console()


def _parse_params(raw: str | None, creature: str | None) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if raw:
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise ValueError("--params must be a JSON object")
        params.update(payload)
    if creature and "monster" not in params and "creature" not in params:
        params["monster"] = creature
    return params


def render_result(result: BuildResult, *, output_format: str, show_diagnostics: bool, console: Console | None = None) -> None:
    console = console or _CONSOLE
    if output_format == "json":
        console.print(Syntax(json.dumps(result.record, indent=2, ensure_ascii=False), "json"))
    else:
        console.print(Syntax(dump_record(result.record), "yaml"))

    if show_diagnostics and result.diagnostics:
        lines = [f"[yellow]{row.kind}[/yellow] {row.message}" for row in result.diagnostics]
        console.print(Panel.fit("\n".join(lines), title="Diagnostics", border_style="yellow"))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve a creature statblock from layered sources")
    parser.add_argument("creature", nargs="?", help="Bestiary name of the base creature")
    parser.add_argument("--params", help="Override parameters as a JSON object")
    parser.add_argument("--bestiary", help="Directory of bestiary JSON files")
    parser.add_argument("--format", choices=["yaml", "json"], default="yaml")
    parser.add_argument("--diagnostics", action="store_true", help="Show non-fatal resolution notes")
    args = parser.parse_args(argv)

    params = _parse_params(args.params, args.creature)
    if not params:
        parser.error("give a creature name or --params")

    builder = create_creature_builder(params, registry=create_registry(args.bestiary))
    result = asyncio.run(builder.build_result())
    render_result(result, output_format=args.format, show_diagnostics=args.diagnostics)
    return 0

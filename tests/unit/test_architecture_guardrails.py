from __future__ import annotations

import ast
import graphlib
import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

ROOT = Path(__file__).resolve().parents[2]
PACKAGE_ROOT = ROOT / "src" / "statblocks"

LAYERS = ("domain", "application", "infrastructure", "presentation")
FORBIDDEN_LAYER_IMPORTS = {
    "domain": {"application", "infrastructure", "presentation"},
    "application": {"infrastructure", "presentation"},
    "infrastructure": {"presentation"},
}
# Third-party packages allowed per layer; the domain stays dependency free.
ALLOWED_THIRD_PARTY = {
    "domain": set(),
    "application": {"yaml"},
    "infrastructure": set(),
}


def _module_name(path: Path) -> str:
    return ".".join(path.relative_to(ROOT / "src").with_suffix("").parts)


def _layer(module: str) -> str | None:
    parts = module.split(".")
    if len(parts) > 1 and parts[0] == "statblocks" and parts[1] in LAYERS:
        return parts[1]
    return None


def _imported_modules(tree: ast.AST) -> set[str]:
    imported: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            imported.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            imported.add(node.module)
    return imported


def _import_graph() -> dict[str, set[str]]:
    graph: dict[str, set[str]] = {}
    for path in sorted(PACKAGE_ROOT.rglob("*.py")):
        tree = ast.parse(path.read_text(encoding="utf-8"))
        graph[_module_name(path)] = _imported_modules(tree)
    return graph


def _internal_edges(graph: dict[str, set[str]]) -> dict[str, set[str]]:
    known = set(graph)
    edges: dict[str, set[str]] = {}
    for module, targets in graph.items():
        edges[module] = {target for target in targets if target in known and target != module}
    return edges


class ArchitectureGuardrailTests(unittest.TestCase):
    def test_layers_only_import_inward(self) -> None:
        violations = []
        for module, targets in _internal_edges(_import_graph()).items():
            forbidden = FORBIDDEN_LAYER_IMPORTS.get(_layer(module) or "", set())
            violations.extend(f"{module} -> {target}" for target in sorted(targets) if _layer(target) in forbidden)

        self.assertEqual([], violations, "Layer imports point outward")

    def test_inner_layers_keep_third_party_imports_small(self) -> None:
        stdlib = set(sys.stdlib_module_names) | {"__future__"}
        violations = []
        for module, targets in _import_graph().items():
            layer = _layer(module)
            if layer not in ALLOWED_THIRD_PARTY:
                continue
            for target in sorted(targets):
                top = target.split(".")[0]
                if top in stdlib or top == "statblocks":
                    continue
                if top not in ALLOWED_THIRD_PARTY[layer]:
                    violations.append(f"{module} -> {target}")

        self.assertEqual([], violations, "Unexpected third-party import in an inner layer")

    def test_runtime_import_graph_has_no_cycles(self) -> None:
        sorter = graphlib.TopologicalSorter(_internal_edges(_import_graph()))
        try:
            sorter.prepare()
        except graphlib.CycleError as exc:
            self.fail(f"Import cycle detected: {' -> '.join(exc.args[1])}")


if __name__ == "__main__":
    unittest.main()

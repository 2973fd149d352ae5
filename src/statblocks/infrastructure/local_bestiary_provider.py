import json
from pathlib import Path

from statblocks.infrastructure.inmemory.inmemory_bestiary import InMemoryBestiary


class BestiaryDatasetError(ValueError):
    pass


class LocalBestiaryProvider:
    """Loads creature records from the ``*.json`` files of a directory."""

    def __init__(self, root_dir: str | Path) -> None:
        self.root_dir = Path(root_dir)
        self._rows_cache: list[dict] | None = None

    def _dataset_paths(self) -> list[Path]:
        if not self.root_dir.exists():
            raise FileNotFoundError(f"Local bestiary directory not found: {self.root_dir}")
        return sorted(path for path in self.root_dir.glob("*.json") if path.is_file())

    @staticmethod
    def _rows_from_payload(raw, path: Path) -> list[dict]:
        if isinstance(raw, dict):
            if "name" in raw and "results" not in raw and "creatures" not in raw:
                rows = [raw]
            else:
                rows = raw.get("results") or raw.get("creatures") or []
        elif isinstance(raw, list):
            rows = raw
        else:
            raise BestiaryDatasetError(f"Unsupported bestiary payload in {path}")
        return [row for row in rows if isinstance(row, dict) and isinstance(row.get("name"), str) and row["name"]]

    def load_rows(self) -> list[dict]:
        if self._rows_cache is not None:
            return self._rows_cache

        rows: list[dict] = []
        for path in self._dataset_paths():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise BestiaryDatasetError(f"Invalid JSON in {path}: {exc}") from exc
            rows.extend(self._rows_from_payload(raw, path))
        self._rows_cache = rows
        return rows

    def load_bestiary(self) -> InMemoryBestiary:
        return InMemoryBestiary(self.load_rows())

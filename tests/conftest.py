import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

_STATBLOCKS_ENV = (
    "STATBLOCKS_BESTIARY_DIR",
    "STATBLOCKS_DEFAULT_LAYOUT",
    "STATBLOCKS_LINK_TRANSFORM_ENABLED",
    "STATBLOCKS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_statblocks_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _STATBLOCKS_ENV:
        monkeypatch.delenv(name, raising=False)

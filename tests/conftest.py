import random
import sys
from pathlib import Path
from typing import Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

_TALE_ENV = ("TALE_DATABASE_URL", "TALE_SAVE_SLOT", "TALE_DEBUG", "TALE_LOG_LEVEL", "TALE_PLAYER_NAME")


@pytest.fixture(autouse=True)
def isolated_tale_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _TALE_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def pinned_random() -> Iterator[None]:
    state = random.getstate()
    random.seed(1902)
    yield
    random.setstate(state)

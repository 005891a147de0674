from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

from cachesim.entity.model import CacheConfig
from cachesim.memory.memory_manager import SetAssociativeCache

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def traces_dir() -> Path:
    return REPO_ROOT / "traces"


@pytest.fixture
def write_trace(tmp_path: Path) -> Callable[..., Path]:
    def _write(lines: Iterable[str], name: str = "test.trace") -> Path:
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines))
        return path
    return _write


@pytest.fixture
def make_cache() -> Callable[[int, int, int], SetAssociativeCache]:
    def _make(s: int, E: int, b: int) -> SetAssociativeCache:
        return SetAssociativeCache(CacheConfig(s=s, E=E, b=b))
    return _make

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from tests.helpers.declarations import FakeTypeResolver

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "METAMERGE_PRUNED_PREFIXES",
        "METAMERGE_CONVENTION_RESTRICTED",
        "METAMERGE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_resolver() -> FakeTypeResolver:
    return FakeTypeResolver()


@pytest.fixture(scope="session")
def catalog_data() -> dict[str, object]:
    path = Path(__file__).resolve().parent / "data" / "catalog.json"
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


@pytest.fixture
def catalog_file(tmp_path: Path) -> Callable[[dict[str, object]], Path]:
    def write(document: dict[str, object]) -> Path:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return write

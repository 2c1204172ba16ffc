"""Shared test fixtures for the rkutils test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from rkutils.config import Config

DATA_DIR = Path(__file__).parent / "data"


# === Factories ===


class CallRecorder:
    """Builds factories that record the order in which they were invoked."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def value(self, label: str, result: Any) -> Any:
        async def factory() -> Any:
            self.calls.append(label)
            return result

        return factory

    def failure(self, label: str, error: Exception) -> Any:
        async def factory() -> Any:
            self.calls.append(label)
            raise error

        return factory


# === Fixtures ===


@pytest.fixture
def recorder() -> CallRecorder:
    """A fresh call recorder for ordering assertions."""
    return CallRecorder()


@pytest.fixture
def nested() -> dict[str, Any]:
    """A nested structure mixing mappings, lists and falsy leaves."""
    return {
        "kol1": {
            "kol2": {
                "k1": 100,
                "k2": 200,
                "zero": 0,
                "off": False,
                "blank": "",
                "nothing": None,
            },
            "items": [{"id": "a"}, {"id": "b"}],
        },
    }


@pytest.fixture
def data_dir() -> Path:
    """Directory holding source files used by the sandbox tests."""
    return DATA_DIR


@pytest.fixture
def fast_config() -> Config:
    """Config with a zero polling interval."""
    return Config({"wait_until": {"interval": 0, "max_rounds": 3}})


@pytest.fixture
def config_yaml(tmp_path: Path) -> str:
    """Write a sample configuration YAML file and return its path."""
    content = """
shell:
  encoding: utf-8
wait_until:
  interval: 0.5
  max_rounds: 4
app:
  name: demo
  features:
    beta: false
"""
    yaml_file = tmp_path / "rkutils.yaml"
    yaml_file.write_text(content)
    return str(yaml_file)

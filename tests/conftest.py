from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from assembly_transliterator.engine import TranslationEngine
from tests._fixtures.assembly_builder import AssemblyBuilder, FakeLiveTranslator


@pytest.fixture
def assembly_builder(tmp_path: Path) -> AssemblyBuilder:
    """Provide an assembly builder rooted at the pytest tmp_path."""
    return AssemblyBuilder(tmp_path)


@pytest.fixture
def live_translator() -> FakeLiveTranslator:
    return FakeLiveTranslator()


@pytest.fixture
def engine(live_translator: FakeLiveTranslator) -> TranslationEngine:
    """Engine whose tablet misses are translated by the fake live translator."""
    return TranslationEngine(live_translator=live_translator)


@pytest.fixture
def quiet_console() -> Console:
    """Console that swallows progress output."""
    return Console(file=io.StringIO())

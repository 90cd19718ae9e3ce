"""
Tests for the console helpers and the singleton metaclass.
"""

import io

import pytest
from battle_engine.core.content import DEFAULT_DATA_DIR, ContentRepository
from battle_engine.core.utils import ccapture, cprint, crule, set_console
from rich.console import Console


@pytest.fixture
def buffer():
    """Redirects the shared console into a string buffer."""
    stream = io.StringIO()
    previous = set_console(Console(file=stream, width=40, color_system=None))
    yield stream
    set_console(previous)


def test_cprint_writes_to_shared_console(buffer):
    cprint("[bold]Hero A[/] attacks")
    assert buffer.getvalue() == "Hero A attacks\n"


def test_crule_prints_title(buffer):
    crule("Turn 1")
    assert "Turn 1" in buffer.getvalue()


def test_ccapture_returns_rendered_text(buffer):
    assert ccapture("[green]ok[/]") == "ok"
    assert buffer.getvalue() == ""


def test_singleton_reset_builds_a_fresh_instance():
    first = ContentRepository(DEFAULT_DATA_DIR)
    ContentRepository.reset()
    second = ContentRepository()
    assert second is not first
    assert second.data_dir == DEFAULT_DATA_DIR
    assert ContentRepository() is second

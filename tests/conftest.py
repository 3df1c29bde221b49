"""Pytest configuration and shared fixtures for the marksage test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os
from pathlib import Path
from typing import Callable

import pytest
from hypothesis import Phase, Verbosity, settings

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


VaultWriter = Callable[[str, str], Path]


@pytest.fixture(autouse=True)
def clean_marksage_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep MARKSAGE_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("MARKSAGE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """Provide an empty vault directory.

    Returns
    -------
    Path
        Vault root inside the test's temporary directory

    """
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def write_note(vault: Path) -> VaultWriter:
    """Provide a helper that writes a note into the vault.

    Returns
    -------
    callable
        ``write_note(relative_path, content)`` returning the note's path

    """

    def _write(relative_path: str, content: str) -> Path:
        path = vault / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def todo_note() -> str:
    """Provide a tagged todo note with finished and open items."""
    return """---
title: Groceries
---

#todo
- [x] milk
- [ ] eggs
- [x] bread
    - [x] rye
"""

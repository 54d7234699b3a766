"""Pytest configuration for the loctable test suite.

Hypothesis profiles (selected by HYPOTHESIS_PROFILE, else "ci" when
CI=true, else "dev"):
- dev: 200 examples, random seed
- ci: 50 examples, derandomized, failure blobs printed
- verbose: 100 examples with progress output

Tests marked @pytest.mark.fuzz are skipped unless selected with
``pytest -m fuzz``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeAlias

import pytest
from hypothesis import Phase, Verbosity, settings

from loctable.targets import OutputTarget, TargetRegistry

# =============================================================================
# HYPOTHESIS PROFILES
# =============================================================================

_PHASES = (Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink)

_PROFILES: dict[str, dict[str, object]] = {
    "dev": {"max_examples": 200},
    "ci": {"max_examples": 50, "derandomize": True, "print_blob": True},
    "verbose": {"max_examples": 100, "verbosity": Verbosity.verbose},
}

for _name, _options in _PROFILES.items():
    settings.register_profile(_name, phases=_PHASES, **_options)


def _profile_name() -> str:
    requested = os.environ.get("HYPOTHESIS_PROFILE", "")
    if requested in _PROFILES:
        return requested
    return "ci" if os.environ.get("CI") == "true" else "dev"


settings.load_profile(_profile_name())


# =============================================================================
# FUZZ MARKER
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "fuzz: large property runs, skipped by default")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip fuzz tests unless the -m expression mentions them."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return

    skip = pytest.mark.skip(reason="run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip)


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def registry() -> TargetRegistry:
    """Targets for english (default), pl and de."""
    return TargetRegistry([
        OutputTarget("english", "app.texts.english", "EnglishTexts", is_default=True),
        OutputTarget("pl", "app.texts.pl", "PolishTexts"),
        OutputTarget("de", "app.texts.de", "GermanTexts"),
    ])


TreeWriter: TypeAlias = Callable[[Mapping[str, object]], Path]


@pytest.fixture
def write_tree(tmp_path: Path) -> TreeWriter:
    """Write a translations tree: {"english/Main.json": {...}, ...}.

    Values that are mappings are dumped as JSON; strings are written
    verbatim (for malformed-file tests).
    """
    root = tmp_path / "Translations"

    def write(files: Mapping[str, object]) -> Path:
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            text = content if isinstance(content, str) else json.dumps(content, indent=2)
            path.write_text(text, encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return write

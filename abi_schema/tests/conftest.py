import json
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def load_abi_fixture():
    """Return a loader for the JSON ABIs under tests/fixtures/."""

    def _load(name: str):
        return json.loads((FIXTURES_DIR / f"{name}.json").read_text())

    return _load

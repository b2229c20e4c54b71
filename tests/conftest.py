# tests/conftest.py
from pathlib import Path

import pytest

from solface.abi import decode

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures" / "abis"


@pytest.fixture
def abi_path():
    """Returns the path of a fixture ABI by contract name."""
    return lambda name: FIXTURES_DIR / f"{name}.json"


@pytest.fixture
def load_abi(abi_path):
    """Decodes a fixture ABI by contract name."""
    return lambda name: decode(abi_path(name).read_bytes())

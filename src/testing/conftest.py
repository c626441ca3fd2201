import copy
import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

_FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _load_fixture(name: str):
    with open(_FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def record_fixture():
    """A valid record mapping. Each test gets its own copy."""
    return copy.deepcopy(_load_fixture("record.json"))


@pytest.fixture
def success_response():
    return _load_fixture("success-response.json")


@pytest.fixture
def error_response():
    return _load_fixture("error-response.json")


@pytest.fixture
def client(success_response):
    """A synchronous bulk client answering every call with a success response."""
    client = MagicMock()
    client.bulk.return_value = success_response
    return client

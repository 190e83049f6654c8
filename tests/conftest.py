import json
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx
import pytest

from expense_planner.config import PlannerConfig
from expense_planner.planner import FinancePlanner
from expense_planner.storage import EntryStore, KeyValueStore
from expense_planner.tips import TipClient
from tests.fixtures.mock_responses import SUCCESS_BODY


@pytest.fixture
def temp_db():
    """Create isolated test database."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    try:
        yield db_path
    finally:
        Path(db_path).unlink(missing_ok=True)


@pytest.fixture
def kv(temp_db):
    store = KeyValueStore(db_path=temp_db)
    yield store
    store.close()


@pytest.fixture
def entry_store(kv):
    return EntryStore(kv)


@pytest.fixture
def config(temp_db):
    return PlannerConfig(
        api_endpoint="https://tips.example.test/v1/models/test:generateContent",
        api_key="test-key",
        db_path=temp_db,
    )


@pytest.fixture
def captured_requests():
    return []


@pytest.fixture
def json_transport(captured_requests):
    """Build a MockTransport that answers every request with *body* and *status*."""

    def factory(body=SUCCESS_BODY, status=200):
        def handler(request: httpx.Request) -> httpx.Response:
            captured_requests.append(request)
            content = body if isinstance(body, (bytes, str)) else json.dumps(body)
            return httpx.Response(status, content=content)

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def tip_client(config, json_transport):
    return TipClient(config, transport=json_transport())


@pytest.fixture
def planner(entry_store, tip_client):
    return FinancePlanner(entry_store, tip_client)

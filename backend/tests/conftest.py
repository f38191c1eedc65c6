import asyncio
import os
import tempfile

# Point the app at a throwaway SQLite database before anything imports it
os.environ.pop("DATABASE_URL", None)
os.environ["DATA_PATH"] = tempfile.mkdtemp(prefix="ultrasense-test-")
os.environ["ALERT_THRESHOLD"] = "100"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from ultrasense.database import Base, async_session, engine, init_db
from ultrasense.main import app
from ultrasense.routers.distance import get_alerter
from ultrasense.services.alerter import AlerterService
from ultrasense.services.push_sender import PushDeliveryError


class FakePushClient:
    """Records batches instead of calling the push gateway."""

    def __init__(self, failing_groups=()):
        self.batches = []
        self.failing_groups = set(failing_groups)

    async def send_batch(self, messages):
        self.batches.append(messages)
        group = messages[0].experience_id
        if group in self.failing_groups:
            raise PushDeliveryError(f"gateway down for {group}")
        return [{"status": "ok", "id": f"ticket-{i}"} for i, _ in enumerate(messages)]

    def groups(self):
        return [batch[0].experience_id for batch in self.batches]


async def reset_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_db()


async def _reset_and_dispose():
    await reset_database()
    await engine.dispose()


@pytest.fixture
def fake_push():
    return FakePushClient()


@pytest.fixture
def client(fake_push):
    asyncio.run(_reset_and_dispose())
    app.dependency_overrides[get_alerter] = lambda: AlerterService(push_client=fake_push)
    with TestClient(app) as test_client:
        yield test_client
    # Clean up after the test
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def db_session():
    await reset_database()
    async with async_session() as session:
        yield session
    await engine.dispose()

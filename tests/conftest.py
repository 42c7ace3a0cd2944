import copy

import pytest

from rest_framework.test import APIClient

from modules.orders.repositories import InMemoryOrderStateRepository


class RecordingOrderStateRepository(InMemoryOrderStateRepository):
    """In-memory repository that also keeps every saved document, oldest first."""

    def __init__(self, document=None) -> None:
        super().__init__(document)
        self.saves = []

    async def save(self, orders) -> None:
        await super().save(orders)
        self.saves.append(copy.deepcopy(self.document))


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def mixed_document():
    """Two main-list orders and one on machine-A, as stored on the wire."""
    return [
        {"id": 1, "productName": "Laptop", "quantity": 1, "status": "red", "location": "main-list"},
        {"id": 2, "productName": "Mouse", "quantity": 2, "status": "yellow", "location": "main-list"},
        {"id": 3, "productName": "Keyboard", "quantity": 1, "status": "green", "location": "machine-A"},
    ]


@pytest.fixture()
def memory_repository(mixed_document):
    return RecordingOrderStateRepository(mixed_document)

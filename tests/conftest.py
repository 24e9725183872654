import json
import os
import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUBSCRIPTIONS_API_URL", "http://api.test/api/subscriptions")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "x")

from repositories.subscription_repo import SubscriptionRepository

BASE_URL = "http://api.test/api/subscriptions"
BASE_PATH = "/api/subscriptions"


class FakeSubscriptionApi:
    """In-memory stand-in for the subscriptions REST resource."""

    def __init__(self):
        self.records: dict[int, dict] = {}
        self.next_id = 1
        self.requests: list[httpx.Request] = []
        # method -> status code to answer with instead of handling the request
        self.fail: dict[str, int] = {}
        # methods whose requests raise a connection error
        self.unreachable: set[str] = set()

    def seed(self, **fields) -> dict:
        record = {"id": self.next_id, **fields}
        self.records[self.next_id] = record
        self.next_id += 1
        return record

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if request.method in self.fail:
            return httpx.Response(self.fail[request.method], json={"error": "failed"})

        tail = request.url.path[len(BASE_PATH):].strip("/")
        if request.method == "GET" and not tail:
            return httpx.Response(200, json=list(self.records.values()))
        if request.method == "POST" and not tail:
            body = json.loads(request.content)
            # normalize like a server would
            body["name"] = body["name"].strip()
            record = self.seed(**body)
            return httpx.Response(200, json=record)

        record_id = int(tail)
        if record_id not in self.records:
            return httpx.Response(404)
        if request.method == "PUT":
            body = json.loads(request.content)
            body["id"] = record_id
            self.records[record_id] = body
            return httpx.Response(200, json=body)
        if request.method == "DELETE":
            del self.records[record_id]
            return httpx.Response(200)
        return httpx.Response(405)


@pytest.fixture
def fake_api():
    return FakeSubscriptionApi()


@pytest_asyncio.fixture
async def http_client(fake_api):
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler)) as client:
        yield client


@pytest.fixture
def repo(http_client):
    return SubscriptionRepository(http_client, base_url=BASE_URL)


def record(name="Netflix", amount=499.0, cycle="Monthly", next_date="2026-11-01", category="Entertainment"):
    return {
        "name": name,
        "amount": amount,
        "billingCycle": cycle,
        "nextBillingDate": next_date,
        "category": category,
    }

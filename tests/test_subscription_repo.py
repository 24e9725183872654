import json
from datetime import date

import pytest

from conftest import record
from models.subscription import Subscription
from utils.exceptions import CreateError, DeleteError, FetchError, UpdateError


def _new(name="Disney+"):
    return Subscription(name=name, amount=1499.0, billing_cycle="Yearly",
                        next_billing_date=date(2027, 2, 1), category="Entertainment")


@pytest.mark.asyncio
async def test_list_preserves_server_order(fake_api, repo):
    fake_api.seed(**record(name="Zeta"))
    fake_api.seed(**record(name="Alpha"))
    items = await repo.list()
    assert [s.name for s in items] == ["Zeta", "Alpha"]
    assert fake_api.calls("GET")[0].url.path == "/api/subscriptions"


@pytest.mark.asyncio
async def test_list_non_success_raises_fetch_error(fake_api, repo):
    fake_api.fail["GET"] = 500
    with pytest.raises(FetchError) as exc:
        await repo.list()
    assert exc.value.message == "Failed to fetch subscriptions"


@pytest.mark.asyncio
async def test_unreachable_server_raises_same_error(fake_api, repo):
    fake_api.unreachable.add("GET")
    with pytest.raises(FetchError) as exc:
        await repo.list()
    assert exc.value.message == "Failed to fetch subscriptions"


@pytest.mark.asyncio
async def test_list_malformed_body_raises_fetch_error(fake_api, repo):
    fake_api.seed(name="broken")
    with pytest.raises(FetchError):
        await repo.list()


@pytest.mark.asyncio
async def test_create_posts_record_without_id(fake_api, repo):
    await repo.create(_new())
    request = fake_api.calls("POST")[0]
    body = json.loads(request.content)
    assert "id" not in body
    assert body == {
        "name": "Disney+", "amount": 1499.0, "billingCycle": "Yearly",
        "nextBillingDate": "2027-02-01", "category": "Entertainment",
    }
    assert len(fake_api.records) == 1


@pytest.mark.asyncio
async def test_update_puts_full_record(fake_api, repo):
    existing = fake_api.seed(**record())
    changed = _new("Netflix Premium")
    await repo.update(existing["id"], changed)
    request = fake_api.calls("PUT")[0]
    assert request.url.path == f"/api/subscriptions/{existing['id']}"
    body = json.loads(request.content)
    assert set(body) >= {"name", "amount", "billingCycle", "nextBillingDate", "category"}
    assert fake_api.records[existing["id"]]["name"] == "Netflix Premium"


@pytest.mark.asyncio
async def test_update_missing_raises_update_error(repo):
    with pytest.raises(UpdateError):
        await repo.update(99, _new())


@pytest.mark.asyncio
async def test_create_failure_raises_create_error(fake_api, repo):
    fake_api.fail["POST"] = 400
    with pytest.raises(CreateError):
        await repo.create(_new())


@pytest.mark.asyncio
async def test_delete_hits_item_resource(fake_api, repo):
    existing = fake_api.seed(**record())
    await repo.delete(existing["id"])
    assert fake_api.calls("DELETE")[0].url.path == f"/api/subscriptions/{existing['id']}"
    assert fake_api.records == {}


@pytest.mark.asyncio
async def test_delete_unreachable_raises_delete_error(fake_api, repo):
    fake_api.unreachable.add("DELETE")
    with pytest.raises(DeleteError):
        await repo.delete(1)


@pytest.mark.asyncio
async def test_list_with_null_name_raises_fetch_error(fake_api, repo):
    fake_api.seed(**record(name=None))
    with pytest.raises(FetchError):
        await repo.list()

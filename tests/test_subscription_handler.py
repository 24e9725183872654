from types import SimpleNamespace

import pytest

import security.guards
from conftest import record
from handlers.session import REPOSITORY_KEY, get_form
from handlers.subscription_handler import (
    MAX_UPCOMING_DAYS,
    add_command,
    delete_command,
    delete_confirmation_callback,
    set_command,
    upcoming_command,
)
from security.guards import RateLimiter


class FakeMessage:
    def __init__(self):
        self.replies: list[str] = []
        self.markups: list = []

    async def reply_text(self, text, reply_markup=None, **kwargs):
        self.replies.append(text)
        self.markups.append(reply_markup)


class FakeQuery:
    def __init__(self, data):
        self.data = data
        self.edits: list[str] = []

    async def answer(self):
        pass

    async def edit_message_text(self, text, **kwargs):
        self.edits.append(text)


class Chat:
    """One user's chat: shared chat_data, fresh update per command."""

    def __init__(self, repo):
        self.bot_data = {REPOSITORY_KEY: repo}
        self.chat_data: dict = {}
        self.user = SimpleNamespace(id=42, username="tester", first_name="Test")

    def context(self, *args):
        return SimpleNamespace(args=list(args), bot_data=self.bot_data, chat_data=self.chat_data)

    async def command(self, handler, *args) -> FakeMessage:
        message = FakeMessage()
        update = SimpleNamespace(effective_user=self.user, effective_message=message, message=message)
        await handler(update, self.context(*args))
        return message

    async def tap(self, callback_data) -> FakeQuery:
        query = FakeQuery(callback_data)
        update = SimpleNamespace(
            effective_user=self.user, effective_message=FakeMessage(), callback_query=query
        )
        await delete_confirmation_callback(update, self.context())
        return query


@pytest.fixture(autouse=True)
def fresh_rate_limit(monkeypatch):
    monkeypatch.setattr(security.guards, "_limiter", RateLimiter(1000, 60))


@pytest.fixture
def chat(repo):
    return Chat(repo)


def _buttons(message: FakeMessage) -> dict[str, str]:
    row = message.markups[-1].inline_keyboard[0]
    return {"yes": row[0].callback_data, "no": row[1].callback_data}


@pytest.mark.asyncio
async def test_delete_prompt_carries_subscription_id(fake_api, chat):
    fake_api.seed(**record(name="Netflix"))
    message = await chat.command(delete_command, "1")
    assert message.replies == ["Are you sure you want to delete Netflix?"]
    assert _buttons(message) == {"yes": "delete:yes:1", "no": "delete:no:1"}
    assert fake_api.calls("DELETE") == []


@pytest.mark.asyncio
async def test_yes_on_superseded_prompt_deletes_nothing(fake_api, chat):
    fake_api.seed(**record(name="Netflix"))
    fake_api.seed(**record(name="Spotify", category="Music"))

    first = await chat.command(delete_command, "1")
    second = await chat.command(delete_command, "2")
    assert second.replies == ["Are you sure you want to delete Spotify?"]

    query = await chat.tap(_buttons(first)["yes"])
    assert "expired" in query.edits[0]
    assert fake_api.calls("DELETE") == []
    assert sorted(r["name"] for r in fake_api.records.values()) == ["Netflix", "Spotify"]

    query = await chat.tap(_buttons(second)["yes"])
    assert [r["name"] for r in fake_api.records.values()] == ["Netflix"]
    assert "Spotify" not in query.edits[0]


@pytest.mark.asyncio
async def test_no_keeps_the_subscription(fake_api, chat):
    fake_api.seed(**record(name="Netflix"))
    prompt = await chat.command(delete_command, "1")

    query = await chat.tap(_buttons(prompt)["no"])
    assert query.edits == ["👍 Nothing deleted."]
    assert fake_api.calls("DELETE") == []

    # the answered prompt cannot be reused
    query = await chat.tap(_buttons(prompt)["yes"])
    assert "expired" in query.edits[0]
    assert fake_api.calls("DELETE") == []


@pytest.mark.asyncio
async def test_set_matches_closed_lists_case_insensitively(chat):
    await chat.command(add_command)
    await chat.command(set_command, "category", "cloud", "storage")
    await chat.command(set_command, "cycle", "yearly")

    form = get_form(chat.context())
    assert form.draft.category == "Cloud Storage"
    assert form.draft.billing_cycle == "Yearly"


@pytest.mark.asyncio
async def test_set_rejects_value_outside_closed_list(chat):
    await chat.command(add_command)
    message = await chat.command(set_command, "cycle", "Biannual")

    assert message.replies[0].startswith("⚠️ Choose one of: Monthly, Yearly, Weekly")
    assert get_form(chat.context()).draft.billing_cycle == "Monthly"


@pytest.mark.asyncio
async def test_set_keeps_free_text_fields_verbatim(chat):
    await chat.command(add_command)
    await chat.command(set_command, "name", "YouTube", "Premium")
    await chat.command(set_command, "amount", "129")

    draft = get_form(chat.context()).draft
    assert draft.name == "YouTube Premium"
    assert draft.amount.raw == "129"


@pytest.mark.asyncio
async def test_set_without_open_form(chat):
    message = await chat.command(set_command, "name", "Netflix")
    assert message.replies[0].startswith("⚠️ No form is open")


@pytest.mark.asyncio
@pytest.mark.parametrize("days", ["99999999", "-1", str(MAX_UPCOMING_DAYS + 1), "soon"])
async def test_upcoming_rejects_out_of_range_days(fake_api, chat, days):
    message = await chat.command(upcoming_command, days)
    assert message.replies[0].startswith("⚠️ Usage: /upcoming")
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_upcoming_accepts_longest_window(fake_api, chat):
    message = await chat.command(upcoming_command, str(MAX_UPCOMING_DAYS))
    assert len(message.replies) == 1
    assert len(fake_api.calls("GET")) == 1

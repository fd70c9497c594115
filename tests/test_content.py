# tests/test_content.py

from __future__ import annotations

import json
from pathlib import Path

import httpx
import openai
import pytest

from focusforge.llm.client import ContentGenerator, plan_cache_key
from focusforge.llm.models import CoachingStats, ContentSource, PlannedTask, TaskPlan
from focusforge.llm.offline import (
    COACHING_OFFLINE,
    COACHING_ON_ERROR,
    FALLBACK_PLAN,
    REFLECTION_OFFLINE,
    REFLECTION_ON_ERROR,
)
from focusforge.storage.store import Storage

from .conftest import make_settings
from .fakes import FakeChatClient, MemoryBackend

PLAN_JSON = json.dumps(
    {
        "tasks": [
            {"title": "Outline the launch post", "description": "Five bullet skeleton."},
            {"title": "Draft the hook", "description": "Three variants."},
            {"title": "Schedule", "description": "Queue it for 9am."},
        ],
        "strategicAssessment": "High leverage: one post feeds a week of clips.",
    }
)

STATS = CoachingStats(sessions=4, score=99, identity="Writer", streak=6)


def _generator(tmp_path: Path, client: FakeChatClient | None, *, key: str | None = "gsk_test"):
    storage = Storage(MemoryBackend())
    gen = ContentGenerator(make_settings(tmp_path, groq_api_key=key), storage, client=client)
    return gen, storage


def test_cache_key_keeps_goal_prefix_and_separates_long_goals() -> None:
    a = plan_cache_key("Launch my newsletter and grow it to 1k readers")
    b = plan_cache_key("Launch my newsletter and grow it to 5k readers")

    assert a.startswith("cache_tasks_v3_Launch my newsletter and grow _")
    assert a != b
    assert plan_cache_key("ship it") == plan_cache_key("ship it")


@pytest.mark.asyncio
async def test_remote_plan_is_parsed_and_cached(tmp_path: Path) -> None:
    client = FakeChatClient(next_text=PLAN_JSON)
    gen, storage = _generator(tmp_path, client)

    result = await gen.generate_daily_tasks_result("Launch the newsletter", "Writer")

    assert result.source is ContentSource.REMOTE
    assert [t.title for t in result.value.tasks][0] == "Outline the launch post"
    assert result.value.strategic_assessment.startswith("High leverage")

    call = client.calls[0]
    assert call["model"] == "llama-3.3-70b-versatile"
    assert call["response_format"] == {"type": "json_object"}
    assert call["max_tokens"] == 600
    assert "Writer" in call["messages"][0]["content"]
    assert call["messages"][1]["content"] == "Goal: Launch the newsletter"

    cached = await storage.get_item(plan_cache_key("Launch the newsletter"))
    assert cached == json.loads(PLAN_JSON)


@pytest.mark.asyncio
async def test_second_request_for_same_goal_is_served_from_cache(tmp_path: Path) -> None:
    client = FakeChatClient(next_text=PLAN_JSON)
    gen, _ = _generator(tmp_path, client)

    await gen.generate_daily_tasks("Launch the newsletter")
    again = await gen.generate_daily_tasks_result("Launch the newsletter")

    assert again.source is ContentSource.CACHE
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_cached_plan_without_assessment_is_regenerated(tmp_path: Path) -> None:
    client = FakeChatClient(next_text=PLAN_JSON)
    gen, storage = _generator(tmp_path, client)
    stale = TaskPlan(tasks=(PlannedTask("Old", ""),), strategic_assessment="")
    await storage.set_item(plan_cache_key("goal"), stale.to_dict())

    result = await gen.generate_daily_tasks_result("goal")

    assert result.source is ContentSource.REMOTE
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_no_key_returns_fallback_plan_without_network(tmp_path: Path) -> None:
    client = FakeChatClient(next_text=PLAN_JSON)
    gen, storage = _generator(tmp_path, client, key=None)

    result = await gen.generate_daily_tasks_result("goal")

    assert result.source is ContentSource.FALLBACK
    assert result.is_fallback
    assert result.value == FALLBACK_PLAN
    assert client.calls == []
    assert await storage.get_item(plan_cache_key("goal")) is None


@pytest.mark.asyncio
async def test_placeholder_key_counts_as_missing(tmp_path: Path) -> None:
    gen, _ = _generator(tmp_path, FakeChatClient(), key="placeholder_until_set")

    assert gen.configured is False
    assert await gen.generate_reflection("Draft") == REFLECTION_OFFLINE


@pytest.mark.parametrize(
    "reply",
    [
        "not json at all",
        json.dumps({"tasks": []}),
        json.dumps({"tasks": [{"description": "no title"}]}),
        json.dumps(["tasks"]),
        "",
    ],
)
@pytest.mark.asyncio
async def test_malformed_plan_falls_back_and_is_not_cached(tmp_path: Path, reply: str) -> None:
    gen, storage = _generator(tmp_path, FakeChatClient(next_text=reply))

    result = await gen.generate_daily_tasks_result("goal")

    assert result.source is ContentSource.FALLBACK
    assert result.value == FALLBACK_PLAN
    assert await storage.get_item(plan_cache_key("goal")) is None


@pytest.mark.asyncio
async def test_transport_failure_falls_back(tmp_path: Path, caplog) -> None:
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    client = FakeChatClient(error=openai.APIConnectionError(request=request))
    gen, _ = _generator(tmp_path, client)

    plan = await gen.generate_daily_tasks("goal")

    assert plan == FALLBACK_PLAN
    assert any("network/timeout error" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_coaching_remote_offline_and_error_texts(tmp_path: Path) -> None:
    client = FakeChatClient(next_text="  Protect the first sprint of the day.  ")
    gen, _ = _generator(tmp_path, client)

    remote = await gen.generate_executive_coaching_result(STATS)
    assert remote.source is ContentSource.REMOTE
    assert remote.value == "Protect the first sprint of the day."
    assert "4 sessions this week" in client.calls[0]["messages"][1]["content"]
    assert "response_format" not in client.calls[0]

    offline, _ = _generator(tmp_path, client, key=None)
    assert await offline.generate_executive_coaching(STATS) == COACHING_OFFLINE

    failing, _ = _generator(tmp_path, FakeChatClient(error=RuntimeError("boom")))
    assert await failing.generate_executive_coaching(STATS) == COACHING_ON_ERROR


@pytest.mark.asyncio
async def test_reflection_remote_offline_and_error_texts(tmp_path: Path) -> None:
    client = FakeChatClient(next_text="What slowed you down?")
    gen, _ = _generator(tmp_path, client)

    assert await gen.generate_reflection("Draft the hook", "Writer") == "What slowed you down?"
    assert client.calls[0]["messages"][1]["content"] == "Reflection for task: Draft the hook"
    assert client.calls[0]["max_tokens"] == 100

    offline, _ = _generator(tmp_path, client, key=None)
    assert await offline.generate_reflection("x") == REFLECTION_OFFLINE

    empty, _ = _generator(tmp_path, FakeChatClient(next_text=None))
    assert await empty.generate_reflection("x") == REFLECTION_ON_ERROR


def test_plan_from_dict_strips_and_validates() -> None:
    plan = TaskPlan.from_dict(
        {"tasks": [{"title": "  A  ", "description": " b "}], "strategicAssessment": " s "}
    )
    assert plan == TaskPlan(tasks=(PlannedTask("A", "b"),), strategic_assessment="s")

    with pytest.raises(ValueError):
        TaskPlan.from_dict({"tasks": [{"title": "A"}], "strategicAssessment": 3})

# src/focusforge/llm/client.py

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings, has_credential
from ..core.ports import KeyValueStore
from ..core.state import DEFAULT_IDENTITY
from . import prompts
from .models import CoachingStats, ContentSource, Generated, TaskPlan
from .offline import (
    COACHING_OFFLINE,
    COACHING_ON_ERROR,
    REFLECTION_OFFLINE,
    REFLECTION_ON_ERROR,
    fallback_plan,
)

logger = logging.getLogger(__name__)

PLAN_CACHE_PREFIX = "cache_tasks_v3_"
PLAN_CACHE_GOAL_CHARS = 30

PLAN_MAX_TOKENS = 600
COACHING_MAX_TOKENS = 200
REFLECTION_MAX_TOKENS = 100


def plan_cache_key(goal: str) -> str:
    """
    Cache key for a task plan.

    The readable goal prefix is kept for inspection; the digest of the full
    goal keeps two goals sharing a 30-char prefix from colliding.
    """
    digest = hashlib.sha256(goal.strip().encode("utf-8")).hexdigest()[:12]
    return f"{PLAN_CACHE_PREFIX}{goal[:PLAN_CACHE_GOAL_CHARS]}_{digest}"


def _describe_error(exc: Exception) -> str:
    if isinstance(exc, openai.AuthenticationError | openai.PermissionDeniedError):
        return "authentication failed (check FOCUSFORGE_GROQ_API_KEY)"
    if isinstance(exc, openai.RateLimitError):
        return "rate-limited"
    if isinstance(exc, openai.APITimeoutError | openai.APIConnectionError | httpx.TransportError):
        return "network/timeout error"
    if isinstance(exc, openai.APIStatusError):
        return f"HTTP {exc.status_code}"
    if isinstance(exc, json.JSONDecodeError | ValueError):
        return f"malformed response ({exc})"
    return exc.__class__.__name__


class ContentGenerator:
    """
    Task plans, coaching insights and reflection questions from a
    Groq-hosted model (OpenAI-compatible API).

    Every public call returns usable content:
    - no API key -> offline fallback, no network
    - any remote failure -> fallback, logged
    One attempt per call: SDK retries are disabled.
    """

    def __init__(
        self,
        settings: Settings,
        storage: KeyValueStore,
        client: Any | None = None,
    ) -> None:
        self._settings = settings
        self._storage = storage
        self._client = client

    @property
    def configured(self) -> bool:
        return has_credential(self._settings.groq_api_key)

    def _get_client(self) -> Any:
        """Lazily create and cache the OpenAI-compatible client."""
        if self._client is not None:
            return self._client

        s = self._settings
        self._client = AsyncOpenAI(
            base_url=s.llm_base_url,
            api_key=str(s.groq_api_key),
            timeout=httpx.Timeout(s.llm_timeout_seconds, connect=5.0),
            max_retries=0,
        )
        return self._client

    async def _complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
        json_mode: bool = False,
    ) -> str:
        kwargs: dict[str, Any] = {
            "model": self._settings.llm_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        resp = await self._get_client().chat.completions.create(**kwargs)
        content = resp.choices[0].message.content
        if not content or not content.strip():
            raise ValueError("model returned no content")
        return content.strip()

    # ---- task plan ----

    async def _cached_plan(self, key: str) -> TaskPlan | None:
        cached = await self._storage.get_item(key)
        if cached is None:
            return None
        try:
            plan = TaskPlan.from_dict(cached)
        except ValueError:
            logger.debug("Ignoring malformed cached plan key=%s", key)
            return None
        return plan if plan.strategic_assessment else None

    async def generate_daily_tasks_result(
        self, goal: str, identity: str = DEFAULT_IDENTITY
    ) -> Generated[TaskPlan]:
        key = plan_cache_key(goal)

        cached = await self._cached_plan(key)
        if cached is not None:
            logger.info("Returning cached task plan key=%s", key)
            return Generated(cached, ContentSource.CACHE)

        if not self.configured:
            return Generated(fallback_plan(), ContentSource.FALLBACK)

        try:
            content = await self._complete(
                system_prompt=prompts.task_plan_system_prompt(identity),
                user_prompt=prompts.task_plan_user_prompt(goal),
                max_tokens=PLAN_MAX_TOKENS,
                temperature=0.6,
                json_mode=True,
            )
            plan = TaskPlan.from_dict(json.loads(content))
        except Exception as e:
            logger.error("Task plan generation failed: %s", _describe_error(e), exc_info=True)
            return Generated(fallback_plan(), ContentSource.FALLBACK)

        await self._storage.set_item(key, plan.to_dict())
        return Generated(plan, ContentSource.REMOTE)

    async def generate_daily_tasks(self, goal: str, identity: str = DEFAULT_IDENTITY) -> TaskPlan:
        return (await self.generate_daily_tasks_result(goal, identity)).value

    # ---- coaching ----

    async def generate_executive_coaching_result(self, stats: CoachingStats) -> Generated[str]:
        if not self.configured:
            return Generated(COACHING_OFFLINE, ContentSource.FALLBACK)

        try:
            text = await self._complete(
                system_prompt=prompts.coaching_system_prompt(stats.identity),
                user_prompt=prompts.coaching_user_prompt(stats),
                max_tokens=COACHING_MAX_TOKENS,
                temperature=0.8,
            )
        except Exception as e:
            logger.error("Coaching generation failed: %s", _describe_error(e), exc_info=True)
            return Generated(COACHING_ON_ERROR, ContentSource.FALLBACK)
        return Generated(text, ContentSource.REMOTE)

    async def generate_executive_coaching(self, stats: CoachingStats) -> str:
        return (await self.generate_executive_coaching_result(stats)).value

    # ---- reflection ----

    async def generate_reflection_result(
        self, task_title: str, identity: str = DEFAULT_IDENTITY
    ) -> Generated[str]:
        if not self.configured:
            return Generated(REFLECTION_OFFLINE, ContentSource.FALLBACK)

        try:
            text = await self._complete(
                system_prompt=prompts.reflection_system_prompt(identity),
                user_prompt=prompts.reflection_user_prompt(task_title),
                max_tokens=REFLECTION_MAX_TOKENS,
                temperature=0.7,
            )
        except Exception as e:
            logger.error("Reflection generation failed: %s", _describe_error(e), exc_info=True)
            return Generated(REFLECTION_ON_ERROR, ContentSource.FALLBACK)
        return Generated(text, ContentSource.REMOTE)

    async def generate_reflection(self, task_title: str, identity: str = DEFAULT_IDENTITY) -> str:
        return (await self.generate_reflection_result(task_title, identity)).value

    async def aclose(self) -> None:
        client = self._client
        self._client = None
        close = getattr(client, "close", None)
        if callable(close):
            await close()

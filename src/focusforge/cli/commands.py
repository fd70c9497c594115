# src/focusforge/cli/commands.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..billing.models import DEMO_PACKAGES, Package
from ..core.models import DailyTask
from ..core.sprint import ActiveSprint, format_time, run_sprint
from ..core.state import FREE_SESSION_LIMIT
from ..core.summary import build_report, greeting, weekly_stats
from ..llm.models import CoachingStats
from .bootstrap import App

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[App, list[str], CommandEmitter | None], Awaitable[str]]

# Seconds per countdown tick; one tick removes one second from the sprint.
SPRINT_TICK_SECONDS = 1.0

IDENTITIES = ["Solopreneur", "Writer", "Designer", "Developer", "Youtuber", "General Creator"]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /plan, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        hidden: bool = False,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        if not hidden:
            self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, app: App, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        # A console left open past midnight must see the new day's counters.
        app.store.ensure_today()
        return await handler(app, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _resolve_task(app: App, ref: str) -> DailyTask | None:
    """Accept either a 1-based position from /tasks or a task id."""
    tasks = app.store.tasks
    if ref.isdigit():
        idx = int(ref) - 1
        return tasks[idx] if 0 <= idx < len(tasks) else None
    return app.store.find_task(ref)


def _limit_reached(app: App) -> bool:
    return not app.store.is_premium and app.store.session_count >= FREE_SESSION_LIMIT


def _render_tasks(app: App) -> str:
    store = app.store
    if not store.tasks:
        return "No execution blocks yet. Use /plan <goal> to generate today's plan."
    lines: list[str] = []
    if store.strategic_assessment:
        lines.append(f'AI STRATEGIC ASSESSMENT: "{store.strategic_assessment}"')
    lines.append("Daily Execution Blocks:")
    for i, t in enumerate(store.tasks, start=1):
        mark = "x" if t.completed else " "
        spent = f" ({t.time_spent} min)" if t.completed else ""
        lines.append(f"  {i}. [{mark}] {t.title}{spent}")
        if t.description:
            lines.append(f"       {t.description}")
    return "\n".join(lines)


async def cmd_help(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_status(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    s = app.store
    limit = "unlimited" if s.is_premium else f"{s.session_count}/{FREE_SESSION_LIMIT}"
    return (
        f"{greeting(datetime.now().hour)}, {s.creator_identity}\n"
        f"  Day streak: {s.streak}\n"
        f"  Execution score: {s.execution_score}%\n"
        f"  Daily limit: {limit}\n"
        f"  Plan: {'PREMIUM' if s.is_premium else 'FREE'}\n"
        f"  Theme: {'dark' if s.dark_mode else 'light'}"
    )


async def cmd_tasks(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _render_tasks(app)


async def cmd_plan(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /plan <goal>  -> generate 3 execution blocks for the goal
    """
    goal = " ".join(args).strip()
    if not goal:
        return "Usage: /plan <goal>"

    if emit:
        emit("Generating execution plan...")
    plan = await app.generator.generate_daily_tasks(goal, app.store.creator_identity)
    app.store.apply_plan(plan, now_ms=int(time.time() * 1000))
    return _render_tasks(app)


async def cmd_new_plan(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.store.set_tasks([])
    app.store.set_strategic_assessment(None)
    return "Plan cleared. What are we executing today? Use /plan <goal>."


async def _finish_task(app: App, task: DailyTask, minutes: int, emit: CommandEmitter | None) -> str:
    if _limit_reached(app):
        return "Daily session limit reached. Upgrade with /paywall for unlimited sessions."

    question = await app.generator.generate_reflection(task.title, app.store.creator_identity)
    if emit:
        emit(f"Execution complete: {task.title}")
        emit(f"Reflection: {question}")

    before = app.store.session_count
    app.store.complete_task(task.id, minutes)
    if app.store.session_count == before:
        return "Daily session limit reached. Upgrade with /paywall for unlimited sessions."
    return (
        f"Logged {minutes} min on '{task.title}'. "
        f"Score {app.store.execution_score}%, streak {app.store.streak}."
    )


def _sprint_status(app: App) -> str:
    sprint = app.sprint
    if sprint is None:
        return "No sprint running."
    state = "paused" if sprint.control.paused else "running"
    left = format_time(sprint.control.remaining or 0)
    return f"Sprint {state}: {sprint.title} ({left} left). Use /pause, /resume or /abort."


async def _run_sprint_in_background(
    app: App, sprint: ActiveSprint, seconds: int, emit: CommandEmitter | None
) -> str:
    def on_tick(remaining: int) -> None:
        if emit and remaining % 60 == 0:
            emit(f"[{format_time(remaining)}] {sprint.title}")

    try:
        spent = await run_sprint(
            seconds, on_tick=on_tick, tick_seconds=SPRINT_TICK_SECONDS, control=sprint.control
        )
        if app.sprint is sprint:
            app.sprint = None

        app.store.ensure_today()
        task = app.store.find_task(sprint.task_id)
        if task is None:
            # The day rolled over mid-sprint and cleared the plan.
            reply = f"'{sprint.title}' is no longer in today's plan. Nothing was logged."
        elif task.completed:
            reply = f"'{task.title}' is already complete."
        else:
            reply = await _finish_task(app, task, spent, emit)
    except Exception:
        logger.exception("Sprint failed: %s", sprint.title)
        reply = "Sprint failed (see log for details)."
    finally:
        if app.sprint is sprint:
            app.sprint = None

    if emit:
        emit(reply)
    return reply


async def cmd_sprint(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /sprint <n|task-id> [minutes]  -> start a focus sprint in the background;
                                      the task is logged when it runs out
    /sprint                        -> state of the running sprint
    """
    if app.sprint is not None:
        return _sprint_status(app)
    if not args:
        return "Usage: /sprint <n|task-id> [minutes]"

    task = _resolve_task(app, args[0])
    if task is None:
        return f"No task {args[0]!r}. Use /tasks to list today's blocks."
    if task.completed:
        return f"'{task.title}' is already complete."
    if _limit_reached(app):
        return "Daily session limit reached. Upgrade with /paywall for unlimited sessions."

    minutes = app.settings.sprint_minutes
    if len(args) > 1 and args[1].isdigit() and int(args[1]) > 0:
        minutes = int(args[1])

    sprint = ActiveSprint(task_id=task.id, title=task.title)
    app.sprint = sprint
    sprint.runner = asyncio.create_task(_run_sprint_in_background(app, sprint, minutes * 60, emit))
    return (
        f"Sprint: {task.title} ({format_time(minutes * 60)}). "
        "Use /pause, /resume or /abort."
    )


async def cmd_pause(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    if app.sprint is None:
        return "No sprint running."
    app.sprint.control.pause()
    return _sprint_status(app)


async def cmd_resume(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    if app.sprint is None:
        return "No sprint running."
    app.sprint.control.resume()
    return _sprint_status(app)


async def cmd_abort(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /abort  -> leave the running sprint without logging it
    """
    sprint = app.sprint
    if sprint is None:
        return "No sprint running."
    app.sprint = None
    if sprint.runner is not None:
        sprint.runner.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sprint.runner
    logger.info("Sprint abandoned: %s", sprint.title)
    return f"Sprint abandoned: {sprint.title}. Nothing was logged."


async def cmd_done(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /done <n|task-id> [minutes]  -> log a block finished away from the timer
    """
    if not args:
        return "Usage: /done <n|task-id> [minutes]"

    task = _resolve_task(app, args[0])
    if task is None:
        return f"No task {args[0]!r}. Use /tasks to list today's blocks."
    if task.completed:
        return f"'{task.title}' is already complete."
    if app.sprint is not None and app.sprint.task_id == task.id:
        return f"'{task.title}' has a sprint running. Let it finish or use /abort."

    minutes = app.settings.sprint_minutes
    if len(args) > 1 and args[1].isdigit():
        minutes = int(args[1])
    return await _finish_task(app, task, minutes, emit)


async def cmd_summary(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    stats = weekly_stats(app.store.snapshot())
    lines = [
        "Weekly Analytics:",
        f"  Total Sessions: {stats.sessions}",
        f"  Execution Score: {stats.execution_score}",
        f"  Completion Rate: {stats.completion_rate}",
    ]

    if app.store.is_premium:
        insight = await app.generator.generate_executive_coaching(
            CoachingStats(
                sessions=stats.sessions,
                score=stats.execution_score,
                identity=app.store.creator_identity,
                streak=stats.streak,
            )
        )
        lines.append(f"  Pro Insight: {insight}")
    else:
        lines.append("  Pro Insight: locked (see /paywall)")

    lines.append("")
    lines.append(build_report(stats))
    return "\n".join(lines)


async def cmd_identity(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return f"Identity: {app.store.creator_identity}. Options: {', '.join(IDENTITIES)}"

    wanted = " ".join(args).strip()
    for identity in IDENTITIES:
        if identity.lower() == wanted.lower():
            app.store.set_creator_identity(identity)
            return f"Identity set to {identity}."
    return f"Unknown identity {wanted!r}. Options: {', '.join(IDENTITIES)}"


async def cmd_dark(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.store.toggle_dark_mode()
    return f"Dark mode {'ON' if app.store.dark_mode else 'OFF'}."


async def _packages(app: App) -> tuple[Package, ...]:
    offering = await app.entitlements.get_offerings()
    if offering is not None and offering.packages:
        return offering.packages
    return DEMO_PACKAGES


async def cmd_paywall(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    if app.store.is_premium:
        return "You are on PREMIUM."
    lines = ["Upgrade to Premium:"]
    for p in await _packages(app):
        price = f" {p.price}" if p.price else ""
        lines.append(f"  {p.identifier}: {p.title}{price}")
        if p.description:
            lines.append(f"      {p.description}")
    lines.append("Use /buy <package> <purchase-token>, or /restore.")
    return "\n".join(lines)


async def cmd_buy(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /buy <package> [purchase-token]
    """
    if not args:
        return "Usage: /buy <package> [purchase-token]"

    if not app.entitlements.configured:
        return "Subscriptions are unavailable (RevenueCat is not configured)."

    package = next((p for p in await _packages(app) if p.identifier == args[0]), None)
    if package is None:
        return f"Unknown package {args[0]!r}. See /paywall."

    token = args[1] if len(args) > 1 else None
    if await app.entitlements.purchase_product(package, receipt_token=token):
        app.store.set_premium(True)
        return "Welcome to Premium."
    return "Purchase not completed."


async def cmd_restore(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    if await app.entitlements.restore_purchases():
        app.store.set_premium(True)
        return "Purchases restored. You are on PREMIUM."
    return "No active subscription found."


async def cmd_premium(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.store.toggle_premium_override()
    return f"Premium override: {'ON' if app.store.is_premium else 'OFF'}."


async def cmd_reset(app: App, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.store.reset_daily_counter()
    return "Daily counter reset. Tasks cleared."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Dashboard: streak, score, daily limit.", aliases=["home"])
registry.register("tasks", cmd_tasks, help_text="List today's execution blocks.")
registry.register("plan", cmd_plan, help_text="Generate an execution plan: /plan <goal>.")
registry.register("newplan", cmd_new_plan, help_text="Clear today's plan.")
registry.register("sprint", cmd_sprint, help_text="Focus sprint: /sprint <n> [minutes] (no args: status).")
registry.register("pause", cmd_pause, help_text="Pause the running sprint.")
registry.register("resume", cmd_resume, help_text="Resume a paused sprint.")
registry.register("abort", cmd_abort, help_text="Leave the sprint without logging it.")
registry.register("done", cmd_done, help_text="Log a finished block: /done <n> [minutes].")
registry.register("summary", cmd_summary, help_text="Weekly analytics and shareable report.")
registry.register("identity", cmd_identity, help_text="Show/set creator identity.")
registry.register("dark", cmd_dark, help_text="Toggle dark mode.")
registry.register("paywall", cmd_paywall, help_text="Show premium packages.", aliases=["upgrade"])
registry.register("buy", cmd_buy, help_text="Buy a package: /buy <package> <token>.")
registry.register("restore", cmd_restore, help_text="Restore purchases.")
registry.register("reset", cmd_reset, help_text="Reset today's session counter and tasks.")
registry.register("premium", cmd_premium, help_text="Toggle premium override.", hidden=True)

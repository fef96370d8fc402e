"""Database keep-alive scheduler with a monthly ping budget."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Pinger = Callable[[], Awaitable[None]]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def period_key(now: datetime) -> str:
    """Return the budget period (calendar month, UTC) containing now."""
    now = now.astimezone(timezone.utc)
    return f"{now.year:04d}-{now.month:02d}"


def next_period_start(now: datetime) -> datetime:
    """Return the first instant of the month after now, in UTC."""
    now = now.astimezone(timezone.utc)
    if now.month == 12:
        return datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)
    return datetime(now.year, now.month + 1, 1, tzinfo=timezone.utc)


class KeepAliveCommand(str, Enum):
    """Control messages accepted by the scheduler."""

    PAUSE = "pause"
    RESUME = "resume"


@dataclass(frozen=True)
class KeepAliveConfig:
    """Configuration for the keep-alive scheduler."""

    interval_seconds: float = 240.0  # Under the 5 minute idle-suspend window
    monthly_budget: int = 10000
    budget_fraction: float = 0.9

    @property
    def ping_limit(self) -> int:
        """Pings allowed per period before the scheduler stops itself."""
        return int(self.monthly_budget * self.budget_fraction)

    @classmethod
    def from_settings(cls) -> "KeepAliveConfig":
        """Create config from application settings."""
        from beatstore.core.config import get_settings
        settings = get_settings()
        return cls(
            interval_seconds=settings.keep_alive_interval_seconds,
            monthly_budget=settings.keep_alive_monthly_budget,
            budget_fraction=settings.keep_alive_budget_fraction,
        )


@dataclass(frozen=True)
class KeepAliveState:
    """Snapshot of the scheduler's counters and activation.

    paused_reason is "manual" after a pause command and "budget" after the
    ping limit was reached. budget_override is set by a manual resume while
    over the limit and lasts until the period rolls over.
    """

    period: str
    total_pings: int = 0
    failed_pings: int = 0
    active: bool = True
    paused_reason: str | None = None
    budget_override: bool = False
    last_ping_at: datetime | None = None
    last_error: str | None = None


def roll_period(state: KeepAliveState, now: datetime) -> KeepAliveState:
    """Reset the counters when now falls in a later month than state.

    Activation is left alone: a scheduler stopped by its budget stays
    stopped until someone resumes it.
    """
    current = period_key(now)
    if current == state.period:
        return state
    logger.info("Keep-alive period %s ended after %d pings", state.period, state.total_pings)
    return replace(
        state,
        period=current,
        total_pings=0,
        failed_pings=0,
        budget_override=False,
    )


def _over_budget(state: KeepAliveState, config: KeepAliveConfig) -> bool:
    return state.total_pings >= config.ping_limit and not state.budget_override


def plan_tick(
    state: KeepAliveState, config: KeepAliveConfig, now: datetime
) -> tuple[KeepAliveState, bool]:
    """Decide whether a timer tick should ping.

    Returns:
        Tuple of (new_state, should_ping).
    """
    state = roll_period(state, now)
    if not state.active:
        return state, False
    if _over_budget(state, config):
        return replace(state, active=False, paused_reason="budget"), False
    return state, True


def record_ping(
    state: KeepAliveState,
    config: KeepAliveConfig,
    now: datetime,
    error: str | None = None,
) -> KeepAliveState:
    """Count a ping attempt and stop once the budget is used up."""
    state = replace(
        state,
        total_pings=state.total_pings + 1,
        failed_pings=state.failed_pings + (1 if error else 0),
        last_ping_at=now,
        last_error=error,
    )
    if state.active and _over_budget(state, config):
        logger.warning(
            "Keep-alive budget reached (%d/%d pings); pausing until resumed",
            state.total_pings,
            config.ping_limit,
        )
        state = replace(state, active=False, paused_reason="budget")
    return state


def apply_command(
    state: KeepAliveState,
    config: KeepAliveConfig,
    command: KeepAliveCommand,
    now: datetime,
) -> KeepAliveState:
    """Apply a pause or resume message."""
    state = roll_period(state, now)
    if command is KeepAliveCommand.PAUSE:
        return replace(state, active=False, paused_reason="manual")
    return replace(
        state,
        active=True,
        paused_reason=None,
        budget_override=state.budget_override or state.total_pings >= config.ping_limit,
    )


class KeepAliveScheduler:
    """Runs periodic database pings as an asyncio task.

    The task owns the state. Control actions are queued as messages and
    applied inside the loop, and the loop wakes at each month boundary so
    the counters reset even when no ping is due.
    """

    def __init__(
        self,
        ping: Pinger,
        config: KeepAliveConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config or KeepAliveConfig()
        self._ping = ping
        self._clock = clock or _utcnow
        self._state = KeepAliveState(period=period_key(self._clock()))
        self._commands: asyncio.Queue[tuple[KeepAliveCommand, asyncio.Future]] | None = None
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> KeepAliveState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background ping loop."""
        if self._task is None:
            self._commands = asyncio.Queue()
            self._task = asyncio.create_task(self._run())
            logger.info(
                "Keep-alive started: every %ss, limit %d pings/month",
                self.config.interval_seconds,
                self.config.ping_limit,
            )

    async def stop(self) -> None:
        """Stop the background ping loop."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            self._drain_commands()
            self._commands = None
            logger.info("Keep-alive stopped after %d pings this period", self._state.total_pings)

    def _drain_commands(self) -> None:
        """Apply messages the stopped loop never read and answer their senders."""
        if self._commands is None:
            return
        while not self._commands.empty():
            command, reply = self._commands.get_nowait()
            self._state = apply_command(self._state, self.config, command, self._clock())
            if not reply.done():
                reply.set_result(self._state)

    async def send(self, command: KeepAliveCommand) -> KeepAliveState:
        """Deliver a control message and return the resulting state."""
        if not self.is_running or self._commands is None:
            self._state = apply_command(self._state, self.config, command, self._clock())
            return self._state

        reply: asyncio.Future = asyncio.get_running_loop().create_future()
        await self._commands.put((command, reply))
        return await reply

    async def pause(self) -> KeepAliveState:
        return await self.send(KeepAliveCommand.PAUSE)

    async def resume(self) -> KeepAliveState:
        return await self.send(KeepAliveCommand.RESUME)

    def snapshot(self) -> dict[str, Any]:
        """Return counters and budget for monitoring."""
        data = asdict(self._state)
        data.update(
            running=self.is_running,
            interval_seconds=self.config.interval_seconds,
            monthly_budget=self.config.monthly_budget,
            ping_limit=self.config.ping_limit,
            remaining=max(0, self.config.ping_limit - self._state.total_pings),
            next_reset_at=next_period_start(self._clock()),
        )
        return data

    def _seconds_until_reset(self) -> float:
        now = self._clock()
        return max(0.0, (next_period_start(now) - now).total_seconds())

    async def _tick(self) -> None:
        now = self._clock()
        state, should_ping = plan_tick(self._state, self.config, now)
        if not should_ping:
            self._state = state
            return

        error = None
        try:
            await self._ping()
            logger.debug("Keep-alive ping %d ok", state.total_pings + 1)
        except Exception as e:
            error = str(e)
            logger.warning("Keep-alive ping failed: %s", error)

        self._state = record_ping(state, self.config, now, error)

    async def _run(self) -> None:
        """Background loop: wait for the next tick, a reset or a message."""
        loop = asyncio.get_running_loop()
        commands = self._commands
        next_tick = loop.time() + self.config.interval_seconds

        while True:
            timeout = max(0.0, min(next_tick - loop.time(), self._seconds_until_reset()))
            try:
                command, reply = await asyncio.wait_for(commands.get(), timeout=timeout)
            except asyncio.TimeoutError:
                if loop.time() >= next_tick:
                    await self._tick()
                    next_tick = loop.time() + self.config.interval_seconds
                else:
                    self._state = roll_period(self._state, self._clock())
                continue

            self._state = apply_command(self._state, self.config, command, self._clock())
            logger.info("Keep-alive %s (active=%s)", command.value, self._state.active)
            if not reply.done():
                reply.set_result(self._state)


# Global singleton instance
_scheduler: KeepAliveScheduler | None = None


async def _ping_database() -> None:
    from beatstore.services.order_service import OrderService

    await OrderService().ping()


def get_keep_alive_scheduler() -> KeepAliveScheduler:
    """Get or create the global keep-alive scheduler."""
    global _scheduler
    if _scheduler is None:
        _scheduler = KeepAliveScheduler(_ping_database, KeepAliveConfig.from_settings())
    return _scheduler


async def init_keep_alive() -> KeepAliveScheduler:
    """Start the keep-alive scheduler. Call at app startup."""
    scheduler = get_keep_alive_scheduler()
    await scheduler.start()
    return scheduler


async def shutdown_keep_alive() -> None:
    """Stop the keep-alive scheduler. Call at app shutdown."""
    if _scheduler:
        await _scheduler.stop()

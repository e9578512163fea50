"""
Dashboard poller: timer-driven refresh of every adapter view.

- One asyncio task per view (chain, transactions, blocks, validators, price),
  each on its own period.
- A cycle is launched as its own task and never awaited by the timer, so a
  hung upstream call delays only that cycle.
- Every cycle takes the next issue number for its view. Its result is applied
  only if that number is greater than the last applied one; a late response
  never overwrites a newer one.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from zeno_explorer.config.env import DEFAULT_POLL_INTERVALS
from zeno_explorer.explorer.adapter import (
    get_chain_summary,
    get_price_summary,
    get_recent_blocks,
    get_recent_transactions,
    get_validator_summary,
)
from zeno_explorer.rpc.relay import RpcRelay
from zeno_explorer.zeno_logging import bind_view, get_logger

logger = get_logger(__name__)

ViewFetcher = Callable[[RpcRelay], Awaitable[Any]]

VIEW_FETCHERS: dict[str, ViewFetcher] = {
    "chain": get_chain_summary,
    "transactions": get_recent_transactions,
    "blocks": get_recent_blocks,
    "validators": get_validator_summary,
    "price": get_price_summary,
}


@dataclass(frozen=True)
class ViewSnapshot:
    """Latest applied value for one view. sequence 0 means never refreshed."""

    name: str
    sequence: int
    value: Any
    updated_at: float | None

    def to_dict(self) -> dict[str, Any]:
        value = self.value
        if isinstance(value, list):
            rendered = [item.to_dict() for item in value]
        elif value is not None:
            rendered = value.to_dict()
        else:
            rendered = None
        return {
            "sequence": self.sequence,
            "updatedAt": self.updated_at,
            "value": rendered,
        }


class DashboardPoller:
    """
    Periodically re-fetch each dashboard view through the adapter.

    Args:
        relay: Relay shared by all views.
        intervals: Seconds between cycles per view; missing views use the
            defaults (chain 10s, transactions/blocks 5s, validators/price 30s).
        fetchers: Override the view -> adapter function table (tests).
    """

    def __init__(
        self,
        relay: RpcRelay,
        intervals: dict[str, float] | None = None,
        *,
        fetchers: dict[str, ViewFetcher] | None = None,
    ) -> None:
        self._relay = relay
        self._fetchers = dict(fetchers or VIEW_FETCHERS)
        merged = dict(DEFAULT_POLL_INTERVALS)
        merged.update(intervals or {})
        for name, interval in merged.items():
            if interval <= 0:
                raise ValueError(f"poll interval for {name!r} must be positive")
        self._intervals = {name: merged[name] for name in self._fetchers}
        self._issued: dict[str, int] = {name: 0 for name in self._fetchers}
        self._snapshots: dict[str, ViewSnapshot] = {
            name: ViewSnapshot(name=name, sequence=0, value=None, updated_at=None)
            for name in self._fetchers
        }
        self._timers: dict[str, asyncio.Task[None]] = {}
        self._cycles: set[asyncio.Task[None]] = set()
        self._stop: asyncio.Event | None = None

    @property
    def views(self) -> list[str]:
        return list(self._fetchers)

    @property
    def running(self) -> bool:
        return bool(self._timers)

    def snapshot(self) -> dict[str, ViewSnapshot]:
        return dict(self._snapshots)

    def _next_sequence(self, name: str) -> int:
        self._issued[name] += 1
        return self._issued[name]

    def _apply(self, name: str, sequence: int, value: Any) -> bool:
        """Store value unless a newer cycle already landed. Returns True if applied."""
        current = self._snapshots[name]
        if sequence <= current.sequence:
            bind_view(name).info(
                "poller_cycle_stale",
                sequence=sequence,
                applied_sequence=current.sequence,
            )
            return False
        self._snapshots[name] = ViewSnapshot(
            name=name,
            sequence=sequence,
            value=value,
            updated_at=time.time(),
        )
        return True

    async def _run_cycle(self, name: str, sequence: int) -> None:
        log = bind_view(name)
        try:
            value = await self._fetchers[name](self._relay)
        except Exception as e:
            # Adapter functions are total; reaching here is a bug.
            log.exception("poller_cycle_failed", sequence=sequence, error=str(e))
            return
        if self._apply(name, sequence, value):
            log.debug("poller_cycle_applied", sequence=sequence)

    async def refresh(self, name: str) -> ViewSnapshot:
        """Run one cycle for name now and return the view's snapshot afterwards."""
        if name not in self._fetchers:
            raise KeyError(f"unknown view {name!r}")
        await self._run_cycle(name, self._next_sequence(name))
        return self._snapshots[name]

    def _launch_cycle(self, name: str) -> asyncio.Task[None]:
        task = asyncio.create_task(
            self._run_cycle(name, self._next_sequence(name)),
            name=f"poller-{name}",
        )
        self._cycles.add(task)
        task.add_done_callback(self._cycles.discard)
        return task

    async def _timer(self, name: str, interval: float, stop: asyncio.Event) -> None:
        log = bind_view(name)
        log.info("poller_view_started", interval_sec=interval)
        while not stop.is_set():
            self._launch_cycle(name)
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
        log.info("poller_view_stopped")

    def start(self) -> None:
        """Start one timer task per view. Must be called from a running loop."""
        if self._timers:
            return
        self._stop = asyncio.Event()
        for name, interval in self._intervals.items():
            self._timers[name] = asyncio.create_task(
                self._timer(name, interval, self._stop),
                name=f"poller-timer-{name}",
            )
        logger.info("poller_started", views=self.views)

    async def stop(self) -> None:
        """Stop the timers and cancel cycles still waiting on the upstream."""
        if self._stop is not None:
            self._stop.set()
        pending = list(self._timers.values()) + list(self._cycles)
        for task in self._cycles:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._timers.clear()
        self._cycles.clear()
        self._stop = None
        logger.info("poller_stopped")

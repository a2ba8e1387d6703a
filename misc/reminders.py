from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

# sleep granularity; the full delay is never converted to float
MAX_SLEEP_CHUNK_MS = 24 * 60 * 60 * 1000


def _describe_delay(delay_ms: int) -> str:
    # str() of an int is capped at sys.get_int_max_str_digits
    if delay_ms.bit_length() > 64:
        return f"~2^{delay_ms.bit_length()}ms"
    return f"{delay_ms}ms"


class ReminderScheduler:
    """Fire-and-forget one-shot reminders. Pending reminders die with the process."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def pending_count(self) -> int:
        return len(self._tasks)

    def schedule(
        self,
        delay_ms: int,
        callback: Callable[[], Awaitable[None]],
        *,
        label: str = "",
    ) -> asyncio.Task:
        delay_ms = max(0, int(delay_ms))
        task = asyncio.create_task(self._fire(delay_ms, callback, label))
        # the loop only keeps weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        print(f"[Reminder] scheduled {label or 'reminder'} in {_describe_delay(delay_ms)} (pending={len(self._tasks)})")
        return task

    async def _fire(self, delay_ms: int, callback: Callable[[], Awaitable[None]], label: str) -> None:
        remaining = delay_ms
        while remaining > 0:
            chunk = min(remaining, MAX_SLEEP_CHUNK_MS)
            await asyncio.sleep(chunk / 1000)
            remaining -= chunk
        try:
            await callback()
        except Exception as e:
            print(f"[Reminder] delivery failed for {label or 'reminder'}: {e}")

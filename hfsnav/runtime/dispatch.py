"""Owner-thread rendezvous for calls that must run on the UI-owning thread.

Work posted from other threads is queued and executed when the owner pumps.
``call_sync`` blocks the calling worker until the owner has produced a
result, which is how interactive confirmations reach the user from a
background transfer or partition lookup.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from queue import Empty, Queue
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass
class _PendingCall:
    fn: Callable[..., Any]
    args: tuple[Any, ...]
    reply: bool = True
    done: threading.Event = field(default_factory=threading.Event)
    result: Any = None
    error: BaseException | None = None

    def run(self) -> None:
        if not self.reply:
            self.fn(*self.args)
            return
        try:
            self.result = self.fn(*self.args)
        except BaseException as exc:
            self.error = exc
        finally:
            self.done.set()


class OwnerThreadDispatcher:
    """Marshal callables onto the thread that created the dispatcher."""

    def __init__(self) -> None:
        self._owner_ident = threading.get_ident()
        self._calls: Queue[_PendingCall] = Queue()

    @property
    def on_owner_thread(self) -> bool:
        return threading.get_ident() == self._owner_ident

    def call_sync(self, fn: Callable[..., T], *args: Any) -> T:
        """Run ``fn`` on the owner thread and wait for its result.

        Runs inline when already on the owner thread. Exceptions raised by
        ``fn`` are re-raised in the caller.
        """
        if self.on_owner_thread:
            return fn(*args)
        pending = _PendingCall(fn=fn, args=args)
        self._calls.put(pending)
        pending.done.wait()
        if pending.error is not None:
            raise pending.error
        return pending.result

    def post(self, fn: Callable[..., Any], *args: Any) -> None:
        """Queue ``fn`` for the owner thread without waiting."""
        self._calls.put(_PendingCall(fn=fn, args=args, reply=False))

    def pump(self, timeout: float | None = None) -> int:
        """Execute queued calls on the owner thread; return how many ran.

        With ``timeout`` set, waits up to that long for the first call.
        Exceptions from posted calls propagate to the pumping caller.
        """
        ran = 0
        block = timeout is not None
        while True:
            try:
                if block:
                    pending = self._calls.get(timeout=timeout)
                else:
                    pending = self._calls.get_nowait()
            except Empty:
                return ran
            block = False
            pending.run()
            ran += 1


__all__ = ["OwnerThreadDispatcher"]

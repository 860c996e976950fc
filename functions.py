"""
Function wrappers that change how a function is invoked.

once() and memoize() return small callable objects that own their state
(a fired flag, a result cache) behind a lock. delay() hands a validated
DelayRequest to a Scheduler and returns immediately.
"""

import asyncio
import functools
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Set

from models import DelayBackend, DelayRequest, Settings
from utils import strict_key

logger = logging.getLogger('underscore.functions')

_MISSING = object()

_settings: Optional[Settings] = None
_thread_scheduler: Optional["ThreadScheduler"] = None
_state_lock = threading.Lock()


def configure(settings: Settings) -> None:
    """Install settings; the shared thread scheduler is rebuilt on next use."""
    global _settings, _thread_scheduler
    with _state_lock:
        _settings = settings
        _thread_scheduler = None


def _name(func: Callable) -> str:
    return getattr(func, "__qualname__", None) or repr(func)


def get_settings() -> Settings:
    global _settings
    with _state_lock:
        if _settings is None:
            _settings = Settings.from_env()
        return _settings


# ---------- once / memoize ----------

class Once:
    """Calls the wrapped function at most one time and replays its result."""

    def __init__(self, func: Callable):
        functools.update_wrapper(self, func)
        self._func = func
        self._lock = threading.RLock()
        self._called = False
        self._result = None

    @property
    def called(self) -> bool:
        return self._called

    def __call__(self, *args, **kwargs):
        with self._lock:
            if self._called:
                return self._result
            # Flag first so a re-entrant call cannot fire the function again.
            self._called = True
            try:
                self._result = self._func(*args, **kwargs)
            except BaseException:
                self._called = False
                raise
            logger.debug(f"once: {_name(self._func)} fired")
            return self._result


class Memoized:
    """Caches the result of a one-argument function per argument value."""

    def __init__(self, func: Callable):
        functools.update_wrapper(self, func)
        self._func = func
        self._lock = threading.RLock()
        self._cache: Dict[Any, Any] = {}
        self._hits = 0
        self._misses = 0

    @property
    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                'hits': self._hits,
                'misses': self._misses,
                'size': len(self._cache)
            }

    def __call__(self, arg):
        # 1 and 1.0 share a result; True does not.
        key = strict_key(arg)
        with self._lock:
            result = self._cache.get(key, _MISSING)
            if result is not _MISSING:
                self._hits += 1
                return result
            result = self._func(arg)
            self._cache[key] = result
            self._misses += 1
            logger.debug(f"memoize: {_name(self._func)}({arg!r}) computed")
            return result


def once(func: Callable) -> Once:
    return Once(func)


def memoize(func: Callable) -> Memoized:
    """
    Memoize an expensive one-argument function.

    The argument must be hashable. A repeated argument returns the
    identical cached object without calling func again.
    """
    return Memoized(func)


# ---------- delay ----------

def _run(request: DelayRequest) -> None:
    try:
        request.invoke()
    except Exception:
        logger.exception(f"Delayed call to {request.func!r} failed")


class Scheduler(ABC):
    """Runs a DelayRequest once, no sooner than its wait has elapsed."""

    @abstractmethod
    def schedule(self, request: DelayRequest) -> None:
        """Arrange for request to be invoked later; never blocks."""


class ThreadScheduler(Scheduler):
    """One threading.Timer per request."""

    def __init__(self, daemon: bool = True):
        self.daemon = daemon
        self._pending: Set[threading.Timer] = set()
        self._idle = threading.Condition(threading.Lock())

    def schedule(self, request: DelayRequest) -> None:
        deadline = time.monotonic() + request.wait_seconds
        self._arm(request, deadline)
        logger.debug(f"Scheduled {request.func!r} in {request.wait_ms}ms on a timer thread")

    def pending(self) -> int:
        with self._idle:
            return len(self._pending)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait until nothing is pending; False if the timeout ran out first."""
        with self._idle:
            return self._idle.wait_for(lambda: not self._pending, timeout)

    def _arm(self, request: DelayRequest, deadline: float) -> None:
        remaining = max(deadline - time.monotonic(), 0.0)
        timer = threading.Timer(remaining, self._fire)
        timer.args = (timer, request, deadline)
        timer.daemon = self.daemon
        with self._idle:
            self._pending.add(timer)
        timer.start()

    def _fire(self, timer: threading.Timer, request: DelayRequest, deadline: float) -> None:
        try:
            if time.monotonic() < deadline:
                # Woke early; re-arm before dropping this timer so join() keeps waiting.
                self._arm(request, deadline)
                return
            _run(request)
        finally:
            with self._idle:
                self._pending.discard(timer)
                if not self._pending:
                    self._idle.notify_all()


class LoopScheduler(Scheduler):
    """Schedules on an asyncio event loop; the call runs on the loop's thread."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def schedule(self, request: DelayRequest) -> None:
        loop = self.loop
        deadline = loop.time() + request.wait_seconds
        if _running_loop() is loop:
            self._arm(loop, request, deadline)
        else:
            loop.call_soon_threadsafe(self._arm, loop, request, deadline)
        logger.debug(f"Scheduled {request.func!r} in {request.wait_ms}ms on {loop!r}")

    def _arm(self, loop: asyncio.AbstractEventLoop, request: DelayRequest, deadline: float) -> None:
        loop.call_later(max(deadline - loop.time(), 0.0), self._fire, loop, request, deadline)

    def _fire(self, loop: asyncio.AbstractEventLoop, request: DelayRequest, deadline: float) -> None:
        # The loop may run a handle up to one clock tick early.
        if loop.time() < deadline:
            self._arm(loop, request, deadline)
            return
        _run(request)


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def thread_scheduler() -> ThreadScheduler:
    """The shared ThreadScheduler used when delay() is given no scheduler."""
    global _thread_scheduler
    settings = get_settings()
    with _state_lock:
        if _thread_scheduler is None:
            _thread_scheduler = ThreadScheduler(daemon=settings.timer_daemon)
        return _thread_scheduler


def default_scheduler() -> Scheduler:
    backend = get_settings().delay_backend
    loop = _running_loop()
    if backend is DelayBackend.LOOP:
        if loop is None:
            raise RuntimeError("delay backend 'loop' requires a running event loop")
        return LoopScheduler(loop)
    if backend is DelayBackend.AUTO and loop is not None:
        return LoopScheduler(loop)
    return thread_scheduler()


def delay(func: Callable, wait_ms: float, *args, scheduler: Optional[Scheduler] = None, **kwargs) -> None:
    """
    Call func(*args, **kwargs) after at least wait_ms milliseconds.

    delay(some_function, 500, 'a', 'b') calls some_function('a', 'b')
    after 500ms. Each call is independent: nothing is coalesced and
    there is no cancellation.
    """
    request = DelayRequest(func=func, wait_ms=wait_ms, args=args, kwargs=kwargs)
    (scheduler or default_scheduler()).schedule(request)

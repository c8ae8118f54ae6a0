"""Frame-batched component updates.

Update requests are coalesced into a pending set and executed together on
the next frame. Each request returns a future that resolves once the batch
containing it has run.
"""

import asyncio
import logging
from collections.abc import Callable
from contextvars import ContextVar, Token
from types import TracebackType
from typing import Any, Literal, Protocol

from anyio import from_thread

from trellis import env
from trellis.component import Component
from trellis.errors import Errors

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class FrameSource(Protocol):
	"""Something that runs a callback on a later tick, never inline."""

	def request_frame(self, callback: FrameCallback) -> None: ...


def _on_loop(fn: Callable[[asyncio.AbstractEventLoop], Any]) -> Any:
	"""Run `fn` with the main event loop, from the loop or an anyio worker thread."""
	try:
		loop = asyncio.get_running_loop()
	except RuntimeError:

		async def _runner():
			return fn(asyncio.get_running_loop())

		try:
			return from_thread.run(_runner)
		except RuntimeError as exc:
			raise RuntimeError("trellis scheduling requires a running event loop") from exc
	return fn(loop)


class LoopFrameSource:
	"""Runs frames on the asyncio loop, `interval` seconds after the request."""

	interval: float

	def __init__(self, interval: float | None = None) -> None:
		self.interval = env.frame_interval() if interval is None else interval

	def request_frame(self, callback: FrameCallback) -> None:
		_on_loop(lambda loop: loop.call_later(self.interval, callback))


class ImmediateFrameSource:
	"""Runs frames on the next loop iteration."""

	def request_frame(self, callback: FrameCallback) -> None:
		_on_loop(lambda loop: loop.call_soon(callback))


class Scheduler:
	"""Coalesces component updates into batches driven by a `FrameSource`.

	- A component requested several times before its batch runs is updated
	  once; every returned future resolves after that update.
	- Requests made while a batch runs land in a later batch.
	- A failing `update()` is reported and does not stop the batch.
	"""

	frames: FrameSource
	errors: Errors
	_pending: dict[Component, None]
	_running: dict[Component, None]
	_waiters: list[asyncio.Future[None]]
	_scheduled: bool
	_token: "Token[Scheduler | None] | None"

	def __init__(
		self,
		frames: FrameSource | None = None,
		*,
		errors: Errors | None = None,
	) -> None:
		self.frames = frames if frames is not None else LoopFrameSource()
		self.errors = errors if errors is not None else Errors("scheduler")
		self._pending = {}
		self._running = {}
		self._waiters = []
		self._scheduled = False
		self._token = None

	@property
	def pending(self) -> tuple[Component, ...]:
		return tuple(self._pending)

	@property
	def scheduled(self) -> bool:
		return self._scheduled

	# Every read and write of the batch state happens on the loop thread;
	# calls from anyio worker threads hop over through `_on_loop`.

	def request_update(self, component: Component) -> asyncio.Future[None]:
		return _on_loop(lambda loop: self._enqueue(component, loop))

	def cancel_update(self, component: Component) -> None:
		"""Drop `component` from the pending and the running batch, if present."""
		_on_loop(lambda _loop: self._discard(component))

	def _enqueue(
		self, component: Component, loop: asyncio.AbstractEventLoop
	) -> asyncio.Future[None]:
		future: asyncio.Future[None] = loop.create_future()
		self._pending[component] = None
		self._waiters.append(future)
		if not self._scheduled:
			self._scheduled = True
			self.frames.request_frame(self.flush)
		return future

	def _discard(self, component: Component) -> None:
		self._pending.pop(component, None)
		self._running.pop(component, None)

	def flush(self) -> None:
		"""Run one batch now."""
		self._scheduled = False
		self._running, self._pending = self._pending, {}
		waiters, self._waiters = self._waiters, []
		logger.debug(
			"Running update batch: %d component(s), %d waiter(s)",
			len(self._running),
			len(waiters),
		)

		try:
			for component in tuple(self._running):
				# Cancelled by an earlier update in this batch
				if component not in self._running:
					continue
				try:
					component.update()
				except Exception as exc:
					self.errors.report(
						exc, code="update", details={"component": repr(component)}
					)
		finally:
			self._running = {}
			for future in waiters:
				if not future.done():
					future.set_result(None)

	# ------------------------------------------------------------------
	# Current scheduler
	# ------------------------------------------------------------------

	@classmethod
	def current(cls) -> "Scheduler":
		scheduler = SCHEDULER.get()
		if scheduler is not None:
			return scheduler
		global _default_scheduler
		if _default_scheduler is None:
			_default_scheduler = Scheduler()
		return _default_scheduler

	def __enter__(self) -> "Scheduler":
		self._token = SCHEDULER.set(self)
		return self

	def __exit__(
		self,
		exc_type: type[BaseException] | None = None,
		exc_val: BaseException | None = None,
		exc_tb: TracebackType | None = None,
	) -> Literal[False]:
		if self._token is not None:
			SCHEDULER.reset(self._token)
			self._token = None
		return False


SCHEDULER: ContextVar[Scheduler | None] = ContextVar("trellis_scheduler", default=None)
_default_scheduler: Scheduler | None = None


def request_update(component: Component) -> asyncio.Future[None]:
	"""Queue `component` for the next batch of the current scheduler."""
	return Scheduler.current().request_update(component)


def cancel_update(component: Component) -> None:
	Scheduler.current().cancel_update(component)


__all__ = [
	"SCHEDULER",
	"FrameSource",
	"ImmediateFrameSource",
	"LoopFrameSource",
	"Scheduler",
	"cancel_update",
	"request_update",
]

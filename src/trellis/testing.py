"""Helpers for exercising views without a real renderer."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from typing import Any, override

from trellis.component import Component, Listener
from trellis.scheduling import FrameCallback
from trellis.tags import TagDescriptor, parse_tag


class HeadlessComponent(Component):
	"""In-memory component that records everything a view does to it."""

	tag: str
	descriptor: TagDescriptor
	attributes: dict[str, Any]
	listeners: dict[str, list[Listener]]
	updates: int
	_children: list[Component]

	def __init__(self, tag: str) -> None:
		super().__init__()
		self.tag = tag
		self.descriptor = parse_tag(tag)
		self.attributes = {}
		self.listeners = {}
		self.updates = 0
		self._children = []

	@override
	def __repr__(self) -> str:
		return f"HeadlessComponent({self.tag!r})"

	@override
	def get_attribute(self, name: str) -> Any:
		return self.attributes.get(name)

	@override
	def set_attribute(self, name: str, value: Any) -> None:
		self.attributes[name] = value

	@override
	def add_event_listener(self, name: str, listener: Listener) -> None:
		self.listeners.setdefault(name, []).append(listener)

	@override
	def append_child(self, component: Component) -> None:
		self._children.append(component)

	@override
	def remove_child(self, component: Component) -> None:
		self._children = [c for c in self._children if c is not component]

	@override
	def clear_child(self) -> None:
		self._children = []

	@property
	@override
	def children(self) -> Sequence[Component]:
		return self._children

	@override
	def update(self) -> None:
		self.updates += 1
		super().update()

	def dispatch(self, name: str, event: Any = None) -> list[Any]:
		"""Fire `name` and return every listener's result."""
		return [listener(event) for listener in self.listeners.get(name, [])]

	def find_all(self, tag: str) -> list[HeadlessComponent]:
		"""Every descendant (depth-first) whose tag descriptor has tag `tag`."""
		found: list[HeadlessComponent] = []
		for child in self._children:
			if not isinstance(child, HeadlessComponent):
				continue
			if child.descriptor.tag == tag:
				found.append(child)
			found.extend(child.find_all(tag))
		return found


class HeadlessRenderer:
	"""Component factory that keeps every component it created."""

	created: list[HeadlessComponent]

	def __init__(self) -> None:
		self.created = []

	def create_component(self, tag: str) -> HeadlessComponent:
		component = HeadlessComponent(tag)
		self.created.append(component)
		return component


class ManualFrameSource:
	"""Frame source that only runs frames when `pump` is called."""

	callbacks: list[FrameCallback]

	def __init__(self) -> None:
		self.callbacks = []

	def request_frame(self, callback: FrameCallback) -> None:
		self.callbacks.append(callback)

	def pump(self) -> int:
		"""Run the frames requested so far; returns how many ran."""
		callbacks, self.callbacks = self.callbacks, []
		for callback in callbacks:
			callback()
		return len(callbacks)


async def wait_for(
	condition: Callable[[], bool], *, timeout: float = 1.0, interval: float = 0.005
) -> bool:
	"""Poll `condition` until it is true or `timeout` seconds have passed."""
	deadline = time.monotonic() + timeout
	while time.monotonic() < deadline:
		if condition():
			return True
		await asyncio.sleep(interval)
	return condition()


__all__ = [
	"HeadlessComponent",
	"HeadlessRenderer",
	"ManualFrameSource",
	"wait_for",
]

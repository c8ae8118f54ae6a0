"""The capability interface that renderers implement for views.

A `View` drives components only through the methods below. Renderers (DOM,
canvas, headless) subclass `Component` and override the attribute, event and
child methods; anything left unimplemented raises `NotImplementedError` when
a template tries to use it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from trellis.expr.scope import ContextStack

Listener = Callable[[Any], Any]
Updater = Callable[[], None]


def _noop() -> None:
	return None


class Component:
	_context: list[Any]
	_updater: Updater

	def __init__(self) -> None:
		self._context = []
		self._updater = _noop

	def _not_implemented(self, method: str) -> NotImplementedError:
		return NotImplementedError(f"{type(self).__name__} does not implement {method}()")

	# ------------------------------------------------------------------
	# Renderer capabilities
	# ------------------------------------------------------------------

	def get_attribute(self, name: str) -> Any:
		raise self._not_implemented("get_attribute")

	def set_attribute(self, name: str, value: Any) -> None:
		raise self._not_implemented("set_attribute")

	def add_event_listener(self, name: str, listener: Listener) -> None:
		raise self._not_implemented("add_event_listener")

	def append_child(self, component: Component) -> None:
		raise self._not_implemented("append_child")

	def remove_child(self, component: Component) -> None:
		raise self._not_implemented("remove_child")

	def clear_child(self) -> None:
		raise self._not_implemented("clear_child")

	@property
	def children(self) -> Sequence[Component]:
		return ()

	# ------------------------------------------------------------------
	# View machinery
	# ------------------------------------------------------------------

	def set_context(self, context_stack: ContextStack) -> None:
		"""Capture the scopes visible to this component, itself last."""
		self._context = [*context_stack, self]

	@property
	def context(self) -> list[Any]:
		return self._context

	@property
	def updater(self) -> Updater:
		return self._updater

	@updater.setter
	def updater(self, value: Updater) -> None:
		self._updater = value

	def update(self) -> None:
		"""Run the updater installed by the view, then update every child."""
		self._updater()
		for child in tuple(self.children):
			child.update()


__all__ = ["Component", "Listener", "Updater"]

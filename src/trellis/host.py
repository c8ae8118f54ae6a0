from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from trellis.component import Component
from trellis.scheduling import Scheduler
from trellis.view import ComponentFactory, View


class ViewHost:
	"""Owns one template, its root component and its update requests.

	```python
	host = ViewHost("#editor", template, renderer.create_component)
	await host.show(editor_state)
	editor_state.title = "Renamed"
	await host.update()
	host.destroy()
	```
	"""

	view: View
	create_component: ComponentFactory
	_scheduler: Scheduler | None
	_component: Component | None

	def __init__(
		self,
		tag: str,
		template: Mapping[str, Any],
		create_component: ComponentFactory,
		*,
		scheduler: Scheduler | None = None,
		strict: bool | None = None,
	) -> None:
		self.view = View(tag, template, strict=strict)
		self.create_component = create_component
		self._scheduler = scheduler
		self._component = None

	@property
	def scheduler(self) -> Scheduler:
		if self._scheduler is None:
			return Scheduler.current()
		return self._scheduler

	@property
	def component(self) -> Component | None:
		return self._component

	def show(self, scope: Any, *scopes: Any) -> asyncio.Future[None]:
		"""Build the root component against ``[scope, *scopes]`` and render it."""
		if self._component is not None:
			self.scheduler.cancel_update(self._component)
		self._component = self.view.build_component(
			[scope, *scopes], self.create_component
		)
		return self.scheduler.request_update(self._component)

	def update(self) -> asyncio.Future[None]:
		if self._component is None:
			raise RuntimeError("ViewHost.show() must be called before update()")
		return self.scheduler.request_update(self._component)

	def destroy(self) -> None:
		if self._component is not None:
			self.scheduler.cancel_update(self._component)
			self._component = None


__all__ = ["ViewHost"]

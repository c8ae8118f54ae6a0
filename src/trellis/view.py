"""Declarative views compiled from template mappings.

A template is a nested mapping. Keys are either tag descriptors (child
views) or directives:

- ``once:<attr>``   set once when the component is created
- ``bind:<attr>``   re-evaluated and set on every update
- ``on:<event>``    evaluated with an ``{"event": ...}`` scope when fired
- ``forEach:<name>`` repeat the node for every item of a list
- ``if``            build the node only while the condition is truthy

A `View` is built once per template. Each component it creates installs an
updater that re-evaluates the child views and only rebuilds a child slot
when its list identity, its item count or one of its conditions changed.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Mapping, Sequence, Sized
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, NamedTuple

from trellis.component import Component
from trellis.errors import EvaluationError, TemplateError, TrellisError
from trellis.expr.compiler import Resolver
from trellis.expr.scope import ContextStack
from trellis.expr.template import compile as compile_template
from trellis.expr.template import constant
from trellis.tags import TagDescriptor, parse_tag

logger = logging.getLogger(__name__)

ComponentFactory = Callable[[str], Component]

ONCE_PREFIX = "once:"
BIND_PREFIX = "bind:"
ON_PREFIX = "on:"
FOR_EACH_PREFIX = "forEach:"
IF_KEY = "if"


class StaleItemsWarning(RuntimeWarning):
	"""A repeated list kept its identity and length but its items changed."""


class ForEach(NamedTuple):
	name: str
	items: Resolver


@dataclass(slots=True)
class DependencyEntry:
	condition: bool
	context: ContextStack


@dataclass(slots=True)
class Dependency:
	"""Result of evaluating one child view against a context stack."""

	view: View
	# The evaluated forEach list, None for non-repeated views
	iterator: Any
	entries: list[DependencyEntry]

	def differs(self, other: Dependency) -> bool:
		if self.iterator is not other.iterator:
			return True
		if len(self.entries) != len(other.entries):
			return True
		return any(
			a.condition != b.condition for a, b in zip(self.entries, other.entries)
		)

	def create(self, create_component: ComponentFactory) -> list[Component]:
		return [
			self.view.create_component(create_component, entry.context)
			for entry in self.entries
			if entry.condition
		]


def _directive_name(key: str, prefix: str) -> str:
	name = key[len(prefix) :].strip()
	if not name:
		raise TemplateError(f"Directive {key!r} is missing a name")
	return name


class View:
	__slots__: tuple[str, ...] = (
		"_tag",
		"_descriptor",
		"_children",
		"_once",
		"_bind",
		"_on",
		"_for_each",
		"_condition",
	)

	_tag: str
	_descriptor: TagDescriptor
	_children: tuple[View, ...]
	_once: Mapping[str, Resolver]
	_bind: Mapping[str, Resolver]
	_on: Mapping[str, Resolver]
	_for_each: ForEach | None
	_condition: Resolver

	def __init__(
		self,
		tag: str,
		template: Mapping[str, Any] | None = None,
		*,
		strict: bool | None = None,
	) -> None:
		self._tag = tag
		self._descriptor = parse_tag(tag)
		children: list[View] = []
		once: dict[str, Resolver] = {}
		bind: dict[str, Resolver] = {}
		on: dict[str, Resolver] = {}
		for_each: ForEach | None = None
		condition: Resolver = constant(True)

		def compiled(value: Any) -> Resolver:
			return compile_template(value, strict=strict)

		for key, value in (template or {}).items():
			if not isinstance(key, str):
				raise TemplateError(f"Template keys must be strings, got {key!r} in {tag!r}")
			try:
				if key.startswith(ONCE_PREFIX):
					once[_directive_name(key, ONCE_PREFIX)] = compiled(value)
				elif key.startswith(BIND_PREFIX):
					bind[_directive_name(key, BIND_PREFIX)] = compiled(value)
				elif key.startswith(ON_PREFIX):
					on[_directive_name(key, ON_PREFIX)] = compiled(value)
				elif key.startswith(FOR_EACH_PREFIX):
					if for_each is not None:
						raise TemplateError(f"{tag!r} declares more than one forEach directive")
					for_each = ForEach(_directive_name(key, FOR_EACH_PREFIX), compiled(value))
				elif key == IF_KEY:
					condition = compiled(value)
				else:
					if value is None:
						value = {}
					if not isinstance(value, Mapping):
						raise TemplateError(
							f"Child {key!r} must map to a template, got {type(value).__name__}"
						)
					children.append(View(key, value, strict=strict))
			except TrellisError as exc:
				exc.add_note(f"in template node {tag!r} at key {key!r}")
				raise

		self._children = tuple(children)
		self._once = MappingProxyType(once)
		self._bind = MappingProxyType(bind)
		self._on = MappingProxyType(on)
		self._for_each = for_each
		self._condition = condition

	def __repr__(self) -> str:
		return f"View({self._tag!r}, children={len(self._children)})"

	@property
	def tag(self) -> str:
		return self._tag

	@property
	def descriptor(self) -> TagDescriptor:
		return self._descriptor

	@property
	def children(self) -> tuple[View, ...]:
		return self._children

	@property
	def once(self) -> Mapping[str, Resolver]:
		return self._once

	@property
	def bind(self) -> Mapping[str, Resolver]:
		return self._bind

	@property
	def on(self) -> Mapping[str, Resolver]:
		return self._on

	@property
	def for_each(self) -> ForEach | None:
		return self._for_each

	@property
	def condition(self) -> Resolver:
		return self._condition

	# ------------------------------------------------------------------
	# Building
	# ------------------------------------------------------------------

	def _check(self, context_stack: ContextStack) -> bool:
		return bool(self._condition(context_stack))

	def build(
		self, context_stack: ContextStack, previous: Dependency | None = None
	) -> Dependency:
		"""Evaluate this view's forEach list and conditions.

		With a `previous` result for a repeated view whose list is the same
		object with the same length, the cached per-item contexts are reused
		and only the conditions are re-evaluated against them.
		"""
		if self._for_each is None:
			return Dependency(
				self, None, [DependencyEntry(self._check(context_stack), context_stack)]
			)

		name, items = self._for_each
		iterable = items(context_stack)
		if iterable is None:
			iterable = ()

		if (
			previous is not None
			and previous.iterator is iterable
			and isinstance(iterable, Sized)
			and len(iterable) == len(previous.entries)
		):
			self._warn_if_stale(name, iterable, previous)
			return Dependency(
				self,
				iterable,
				[
					DependencyEntry(self._check(entry.context), entry.context)
					for entry in previous.entries
				],
			)

		try:
			iterator = iter(iterable)
		except TypeError as exc:
			raise EvaluationError(
				f"forEach:{name} on {self._tag!r} expected an iterable, "
				+ f"got {type(iterable).__name__}"
			) from exc

		entries: list[DependencyEntry] = []
		for item in iterator:
			item_context = [{name: item}, *context_stack]
			entries.append(DependencyEntry(self._check(item_context), item_context))
		return Dependency(self, iterable, entries)

	def _warn_if_stale(self, name: str, iterable: Any, previous: Dependency) -> None:
		if not isinstance(iterable, Sequence):
			return
		for entry, item in zip(previous.entries, iterable):
			if entry.context[0][name] is not item:
				warnings.warn(
					f"forEach:{name} on {self._tag!r} was mutated in place; "
					+ "components keep their previous items until the list is replaced",
					StaleItemsWarning,
					stacklevel=2,
				)
				return

	def build_component(
		self, context_stack: ContextStack, create_component: ComponentFactory
	) -> Component:
		"""Build the single root component of this template."""
		dependency = self.build(context_stack)
		if dependency.iterator is not None or len(dependency.entries) != 1:
			raise TemplateError(f"The root of template {self._tag!r} must not iterate")
		entry = dependency.entries[0]
		if not entry.condition:
			raise TemplateError(
				f"The root of template {self._tag!r} must yield exactly one component"
			)
		return self.create_component(create_component, entry.context)

	def create_component(
		self, create_component: ComponentFactory, context_stack: ContextStack
	) -> Component:
		component = create_component(self._tag)
		component.set_context(context_stack)

		for event, handler in self._on.items():
			component.add_event_listener(event, _make_listener(handler, component))

		for name, resolver in self._once.items():
			component.set_attribute(name, resolver(component.context))

		children = self._children
		bind = self._bind
		slots: list[tuple[Dependency, list[Component]]] = []

		def updater() -> None:
			nonlocal slots
			changed = False
			next_slots: list[tuple[Dependency, list[Component]]] = []
			for i, child in enumerate(children):
				previous = slots[i] if slots else None
				dependency = child.build(context_stack, previous[0] if previous else None)
				if previous is not None and not previous[0].differs(dependency):
					next_slots.append((dependency, previous[1]))
					continue
				changed = True
				logger.debug("Rebuilding %r under %r", child, self)
				next_slots.append((dependency, dependency.create(create_component)))
			slots = next_slots

			if changed:
				component.clear_child()
				for _, built in slots:
					for built_component in built:
						component.append_child(built_component)

			for name, resolver in bind.items():
				component.set_attribute(name, resolver(component.context))

		component.updater = updater
		return component


def _make_listener(handler: Resolver, component: Component) -> Callable[[Any], Any]:
	def listener(event: Any) -> Any:
		return handler([{"event": event}, *component.context])

	return listener


__all__ = [
	"BIND_PREFIX",
	"FOR_EACH_PREFIX",
	"IF_KEY",
	"ONCE_PREFIX",
	"ON_PREFIX",
	"ComponentFactory",
	"Dependency",
	"DependencyEntry",
	"ForEach",
	"StaleItemsWarning",
	"View",
]

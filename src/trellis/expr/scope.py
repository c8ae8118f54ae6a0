"""Symbol lookup across an ordered context stack.

A context stack is a sequence of scopes, innermost first. A scope is any
mapping or object. A mapping owns a name when the name is one of its keys;
any other object owns a name when it has that attribute. Ownership decides
the lookup, not the value: an owned name whose value is ``None`` is found and
stops the scan.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias

ContextStack: TypeAlias = Sequence[Any]


class _Missing:
	__slots__: tuple[str, ...] = ()

	def __repr__(self) -> str:
		return "MISSING"

	def __bool__(self) -> bool:
		return False


MISSING: Any = _Missing()


def has_own(scope: Any, name: str) -> bool:
	if isinstance(scope, Mapping):
		return name in scope
	return hasattr(scope, name)


def get_own(scope: Any, name: str) -> Any:
	if isinstance(scope, Mapping):
		return scope[name]
	return getattr(scope, name)


def lookup(context_stack: ContextStack, name: str) -> tuple[Any, Any]:
	"""Return ``(owning_scope, value)`` for the first scope owning `name`.

	Returns ``(None, MISSING)`` when no scope owns it.
	"""
	for scope in context_stack:
		if has_own(scope, name):
			return scope, get_own(scope, name)
	return None, MISSING


def member(value: Any, key: Any) -> Any:
	"""Read `key` from `value` the way a template expects.

	Mappings are read by key, falling back to their attributes so that
	methods such as ``keys`` stay reachable. Sequences are read by
	non-negative integer position and other objects by attribute. Anything
	that cannot be read yields ``None``.
	"""
	if value is None:
		return None
	if isinstance(value, Mapping):
		try:
			if key in value:
				return value[key]
		except TypeError:
			# Unhashable key
			return None
	elif isinstance(key, int) and not isinstance(key, bool) and isinstance(value, Sequence):
		if key < 0:
			return None
		try:
			return value[key]
		except IndexError:
			return None
	if isinstance(key, str):
		return getattr(value, key, None)
	return None


__all__ = ["MISSING", "ContextStack", "get_own", "has_own", "lookup", "member"]

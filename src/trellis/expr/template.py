from __future__ import annotations

import logging
import re
from typing import Any

from trellis.errors import TrellisError
from trellis.expr.compiler import Resolver, compile_tokens
from trellis.expr.parser import parse
from trellis.expr.scope import ContextStack

logger = logging.getLogger(__name__)

# First {{ ... }} span, non-greedy, with the literal text around it
_SPAN = re.compile(r"^(.*?)\{\{(.+?)\}\}(.*)$", re.DOTALL)


def constant(value: Any) -> Resolver:
	def resolve(_context_stack: ContextStack) -> Any:
		return value

	return resolve


def compile_expression(text: str, *, strict: bool | None = None) -> Resolver:
	"""Compile a bare expression (no surrounding braces)."""
	return compile_tokens(parse(text), strict=strict)


def to_text(value: Any) -> str:
	"""Text form of an interpolated value. ``None`` renders as nothing."""
	if value is None:
		return ""
	if value is True:
		return "true"
	if value is False:
		return "false"
	return str(value)


def compile(template: Any, *, strict: bool | None = None) -> Resolver:
	"""Compile a template value into a resolver.

	- Non-string values resolve to themselves.
	- A string made of exactly one ``{{ expr }}`` span resolves to the raw
	  expression value, so bindings may receive lists, dicts or callables.
	- Any other string resolves to the concatenated text of its literal runs
	  and expression values.
	"""
	if not isinstance(template, str):
		return constant(template)

	compiled: list[Resolver] = []
	remaining = template
	while True:
		found = _SPAN.match(remaining)
		if found is None:
			if remaining or not compiled:
				compiled.append(constant(remaining))
			break

		head, expression, tail = found.groups()
		if head:
			compiled.append(constant(head))
		try:
			compiled.append(compile_expression(expression, strict=strict))
		except TrellisError as exc:
			exc.add_note(f"while compiling template {template!r}")
			raise
		remaining = tail
		if not remaining:
			break

	logger.debug("Compiled template %r into %d part(s)", template, len(compiled))

	if len(compiled) == 1:
		return compiled[0]

	parts = tuple(compiled)

	def interpolate(context_stack: ContextStack) -> str:
		return "".join(to_text(part(context_stack)) for part in parts)

	return interpolate


__all__ = ["compile", "compile_expression", "constant", "to_text"]

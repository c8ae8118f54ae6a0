from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias, TypeVar

from trellis import env
from trellis.errors import EvaluationError, ExpressionSyntaxError
from trellis.expr.builtins import BUILTINS
from trellis.expr.scope import MISSING, ContextStack, lookup, member
from trellis.expr.tokens import (
	Array,
	Call,
	Float,
	Index,
	Integer,
	String,
	Symbol,
	Token,
	describe,
)

logger = logging.getLogger(__name__)

Resolver: TypeAlias = Callable[[ContextStack], Any]
# A step reads and extends the value stack of one evaluation. The entry
# below the top is the receiver of the top value.
Step: TypeAlias = Callable[[list[Any], ContextStack], None]

_F = TypeVar("_F", bound=Callable[..., Any])

_METHOD_ATTR = "__trellis_method__"


def method(fn: _F) -> _F:
	"""Mark a function stored in a mapping as wanting its receiver.

	Attribute access already binds methods on objects. Plain functions kept in
	a dict have no receiver; once marked, ``obj.fn(x)`` calls ``fn(obj, x)``.
	"""
	setattr(fn, _METHOD_ATTR, True)
	return fn


def is_method(fn: Any) -> bool:
	return getattr(fn, _METHOD_ATTR, False) is True


def _invoke(func: Any, receiver: Any, args: list[Any], callee: str) -> Any:
	if not callable(func):
		raise EvaluationError(f"{callee!r} is not callable (got {type(func).__name__})")
	if is_method(func):
		return func(receiver, *args)
	return func(*args)


def _symbol_step(token: Symbol, first: bool, strict: bool) -> Step:
	name = token.name
	if not first:

		def read_member(stack: list[Any], _ctx: ContextStack) -> None:
			stack.append(member(stack[-1], name))

		return read_member

	def read_symbol(stack: list[Any], ctx: ContextStack) -> None:
		scope, value = lookup(ctx, name)
		if value is MISSING:
			if name in BUILTINS:
				scope, value = BUILTINS, BUILTINS[name]
			elif strict:
				raise EvaluationError(f"{name!r} is undefined")
			else:
				logger.warning("Undefined symbol %r resolved to None", name)
				scope, value = None, None
		stack.append(scope)
		stack.append(value)

	return read_symbol


def _literal_step(value: Any, first: bool) -> Step:
	if first:

		def push_literal(stack: list[Any], _ctx: ContextStack) -> None:
			stack.append(value)

		return push_literal

	# A literal after a "." selects a member, the same as brackets would
	def read_literal_member(stack: list[Any], _ctx: ContextStack) -> None:
		stack.append(member(stack[-1], value))

	return read_literal_member


def _compile_step(token: Token, preceding: Sequence[Token], strict: bool) -> Step:
	first = not preceding
	if isinstance(token, Symbol):
		return _symbol_step(token, first, strict)

	if isinstance(token, (Integer, Float, String)):
		return _literal_step(token.value, first)

	if isinstance(token, Index):
		if token.index is None:
			raise ExpressionSyntaxError("Index without an expression")
		index_resolver = compile_tokens(token.index, strict=strict)

		def read_index(stack: list[Any], ctx: ContextStack) -> None:
			stack.append(member(stack[-1], index_resolver(ctx)))

		return read_index

	if isinstance(token, Array):
		element_resolvers = [compile_tokens(e, strict=strict) for e in token.elements]

		def build_array(stack: list[Any], ctx: ContextStack) -> None:
			stack.append([resolve(ctx) for resolve in element_resolvers])

		return build_array

	if isinstance(token, Call):
		arg_resolvers = [compile_tokens(a, strict=strict) for a in token.args]
		callee = source_text(preceding)

		def call(stack: list[Any], ctx: ContextStack) -> None:
			func = stack[-1]
			receiver = stack[-2] if len(stack) > 1 else None
			args = [resolve(ctx) for resolve in arg_resolvers]
			stack.append(_invoke(func, receiver, args, callee))

		return call

	raise ExpressionSyntaxError(f"No compile rule for {describe(token)}")


def source_text(tokens: Sequence[Token]) -> str:
	"""Render parsed tokens back into expression text."""
	out = ""
	for i, token in enumerate(tokens):
		dot = "." if i else ""
		if isinstance(token, Symbol):
			out += dot + token.name
		elif isinstance(token, String):
			out += f"{dot}'{token.value}'"
		elif isinstance(token, (Integer, Float)):
			out += f"{dot}{token.value}"
		elif isinstance(token, Index):
			out += f"[{source_text(token.index or [])}]"
		elif isinstance(token, Array):
			out += "[" + ", ".join(source_text(e) for e in token.elements) + "]"
		elif isinstance(token, Call):
			out += "(" + ", ".join(source_text(a) for a in token.args) + ")"
	return out


def compile_tokens(tokens: Sequence[Token], *, strict: bool | None = None) -> Resolver:
	"""Fold a parsed token list into a resolver over a context stack."""
	if not tokens:
		raise ExpressionSyntaxError("Empty expression")
	if strict is None:
		strict = env.strict_symbols()

	steps = [
		_compile_step(token, tokens[:i], strict=strict)
		for i, token in enumerate(tokens)
	]

	def resolve(context_stack: ContextStack) -> Any:
		stack: list[Any] = []
		for step in steps:
			step(stack, context_stack)
		return stack[-1]

	return resolve


__all__ = ["Resolver", "compile_tokens", "is_method", "method", "source_text"]

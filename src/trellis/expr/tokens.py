"""Token variants produced by the tokenizer and assembled by the parser.

Operand and operator tokens are immutable. The container tokens (`Index`,
`Array`, `Call`) are filled in by the parser while their brackets are open
and own their nested token lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

OperatorChar: TypeAlias = Literal["[", "]", "(", ")", ".", ","]
OPERATOR_CHARS: frozenset[str] = frozenset("[]().,")


@dataclass(frozen=True, slots=True)
class Symbol:
	name: str


@dataclass(frozen=True, slots=True)
class String:
	value: str


@dataclass(frozen=True, slots=True)
class Integer:
	value: int


@dataclass(frozen=True, slots=True)
class Float:
	value: float


@dataclass(frozen=True, slots=True)
class Operator:
	char: OperatorChar


@dataclass(slots=True)
class Index:
	index: list[Token] | None = None


@dataclass(slots=True)
class Array:
	elements: list[list[Token]] = field(default_factory=list)


@dataclass(slots=True)
class Call:
	args: list[list[Token]] = field(default_factory=list)


Operand: TypeAlias = Symbol | String | Integer | Float
Token: TypeAlias = Symbol | String | Integer | Float | Index | Array | Call | Operator


def is_operand(token: Token) -> bool:
	return isinstance(token, (Symbol, String, Integer, Float))


def describe(token: Token | None) -> str:
	"""Short human-readable form used in error messages."""
	if token is None:
		return "nothing"
	if isinstance(token, Symbol):
		return f"symbol {token.name!r}"
	if isinstance(token, String):
		return f"string {token.value!r}"
	if isinstance(token, (Integer, Float)):
		return f"number {token.value!r}"
	if isinstance(token, Operator):
		return f"operator {token.char!r}"
	return type(token).__name__.lower()


__all__ = [
	"OPERATOR_CHARS",
	"Array",
	"Call",
	"Float",
	"Index",
	"Integer",
	"Operand",
	"Operator",
	"OperatorChar",
	"String",
	"Symbol",
	"Token",
	"describe",
	"is_operand",
]

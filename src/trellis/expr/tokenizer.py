from __future__ import annotations

import re
from typing import cast

from trellis.errors import LexicalError
from trellis.expr.tokens import (
	OPERATOR_CHARS,
	Float,
	Integer,
	Operator,
	OperatorChar,
	String,
	Symbol,
	Token,
)

# A run that may still grow into an operand. Sign characters are accepted so
# that signed numbers accumulate; a lone sign fails when the run is flushed.
_CAN_BE_OPERAND = re.compile(r"^(?:[_a-zA-Z][_a-zA-Z0-9]*|[0-9+\-][0-9]*(?:\.[0-9]*)?)$")
_SYMBOL = re.compile(r"^[_a-zA-Z][_a-zA-Z0-9]*$")
_INTEGER = re.compile(r"^[+\-]?[0-9]+$")
_FLOAT = re.compile(r"^[+\-]?[0-9]+\.[0-9]*$")

_QUOTE = "'"


def _make_operand(run: str, source: str) -> Token:
	if _FLOAT.match(run):
		return Float(float(run))
	if _INTEGER.match(run):
		return Integer(int(run))
	if _SYMBOL.match(run):
		return Symbol(run)
	raise LexicalError(f"Unknown token {run!r}", source=source, token=run)


def tokenize(text: str) -> list[Token]:
	"""Split an expression into a flat list of tokens.

	Identifiers become `Symbol`, signed integers and floats become `Integer`
	and `Float`, single-quoted runs become `String` (no escapes), and the
	characters ``[ ] ( ) . ,`` become `Operator`. Whitespace outside strings
	is skipped.
	"""
	tokens: list[Token] = []
	run = ""
	in_string = False

	for char in text:
		if in_string:
			if char == _QUOTE:
				tokens.append(String(run))
				run = ""
				in_string = False
			else:
				run += char
			continue

		if _CAN_BE_OPERAND.match(run + char):
			run += char
			continue

		if run:
			tokens.append(_make_operand(run, text))
			run = ""
			if _CAN_BE_OPERAND.match(char):
				run = char
				continue

		if char.isspace():
			continue
		if char in OPERATOR_CHARS:
			tokens.append(Operator(cast(OperatorChar, char)))
		elif char == _QUOTE:
			in_string = True
		else:
			raise LexicalError(f"Unexpected character {char!r}", source=text, token=char)

	if in_string:
		raise LexicalError("Unterminated string literal", source=text, token=_QUOTE + run)
	if run:
		tokens.append(_make_operand(run, text))

	return tokens


__all__ = ["tokenize"]

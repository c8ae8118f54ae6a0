from __future__ import annotations

from trellis.errors import ExpressionSyntaxError
from trellis.expr.tokenizer import tokenize
from trellis.expr.tokens import (
	Array,
	Call,
	Index,
	Operator,
	Token,
	describe,
	is_operand,
)


class TokenStack:
	"""Stack of token levels used while brackets and parentheses are open.

	Level 0 holds the top-level expression. `elevate` opens a new level for a
	nested index, array element or call argument; `fall` closes it and hands
	back its tokens.
	"""

	__slots__: tuple[str, ...] = ("_levels", "_source")
	_levels: list[list[Token]]
	_source: str

	def __init__(self, source: str = "") -> None:
		self._levels = [[]]
		self._source = source

	@property
	def level(self) -> int:
		return len(self._levels) - 1

	def push(self, token: Token) -> None:
		self._levels[-1].append(token)

	def peek(self, offset: int = 0) -> Token | None:
		"""Last token `offset` levels below the current one, if any."""
		if self.level < offset:
			raise ExpressionSyntaxError(
				"Operator used outside of brackets or parentheses", source=self._source
			)
		tokens = self._levels[self.level - offset]
		return tokens[-1] if tokens else None

	def elevate(self) -> None:
		self._levels.append([])

	def fall(self) -> list[Token]:
		if self.level == 0:
			raise ExpressionSyntaxError("No open level to close", source=self._source)
		return self._levels.pop()

	def get(self, level: int) -> list[Token]:
		if self.level < level:
			raise ExpressionSyntaxError(f"No level {level} to read", source=self._source)
		return self._levels[level]


def parse(text: str) -> list[Token]:
	"""Parse an expression into a single chained token list.

	Member access is implicit: ``a.b`` parses to ``[Symbol(a), Symbol(b)]``.
	Indexing, array literals and calls become container tokens owning their
	nested token lists.
	"""
	stack = TokenStack(text)
	has_operand = False
	# Set by "." until the member name arrives
	expects_member = False

	def fail(message: str) -> ExpressionSyntaxError:
		return ExpressionSyntaxError(message, source=text)

	for token in tokenize(text):
		if is_operand(token):
			if has_operand:
				raise fail(f"Duplicated operand {describe(token)}")
			stack.push(token)
			has_operand = True
			expects_member = False
			continue

		assert isinstance(token, Operator)
		if expects_member:
			raise fail(f"Expected a member name after '.', got {describe(token)}")

		char = token.char
		if char == ".":
			if not has_operand:
				raise fail("No operand to reference with '.'")
			has_operand = False
			expects_member = True

		elif char == ",":
			owner = stack.peek(1)
			if not isinstance(owner, (Call, Array)):
				raise fail(f"Comma used inside {describe(owner)}, expected a call or array")
			if not has_operand:
				raise fail("Unexpected comma without a preceding operand")
			has_operand = False
			if isinstance(owner, Call):
				owner.args.append(stack.fall())
			else:
				owner.elements.append(stack.fall())
			stack.elevate()

		elif char == "[":
			if has_operand:
				stack.push(Index())
			else:
				stack.push(Array())
			has_operand = False
			stack.elevate()

		elif char == "]":
			owner = stack.peek(1)
			if isinstance(owner, Index):
				if stack.peek() is None:
					raise fail("No index value between '[' and ']'")
				owner.index = stack.fall()
			elif isinstance(owner, Array):
				elements = stack.fall()
				if elements:
					owner.elements.append(elements)
			else:
				raise fail(f"Unbalanced ']' closing {describe(owner)}")
			has_operand = True

		elif char == "(":
			if not has_operand:
				raise fail("No operand to call")
			has_operand = False
			stack.push(Call())
			stack.elevate()

		elif char == ")":
			owner = stack.peek(1)
			if not isinstance(owner, Call):
				raise fail(f"Unbalanced ')' closing {describe(owner)}")
			args = stack.fall()
			if args:
				owner.args.append(args)
			has_operand = True

	if expects_member:
		raise fail("Expression ends with a dangling '.'")
	if stack.level > 0:
		raise fail(f"{stack.level} closing bracket(s) or parenthes(es) missing")

	return stack.get(0)


__all__ = ["TokenStack", "parse"]

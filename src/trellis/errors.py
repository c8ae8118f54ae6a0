from __future__ import annotations

import logging
import traceback
from collections.abc import Callable
from typing import Any, Literal

logger = logging.getLogger(__name__)

ErrorCode = Literal["update"]


class TrellisError(Exception):
	"""Base class for every error raised by trellis."""


class LexicalError(TrellisError):
	"""Unknown character run while tokenizing an expression."""

	source: str
	token: str

	def __init__(self, message: str, *, source: str, token: str) -> None:
		super().__init__(f"{message} in expression {source!r}")
		self.source = source
		self.token = token


class ExpressionSyntaxError(TrellisError):
	"""Structurally invalid expression (brackets, operands, commas)."""

	source: str | None

	def __init__(self, message: str, *, source: str | None = None) -> None:
		super().__init__(
			message if source is None else f"{message} in expression {source!r}"
		)
		self.source = source


class TemplateError(TrellisError):
	"""Invalid template shape: bad tag descriptor, bad root, bad directive."""


class EvaluationError(TrellisError):
	"""Raised while evaluating a compiled expression."""


ErrorHandler = Callable[[BaseException, ErrorCode, dict[str, Any]], None]


def _format_stack(exc: BaseException) -> str:
	return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


class Errors:
	"""Error reporter for failures that must not interrupt the caller."""

	__slots__: tuple[str, ...] = ("name", "handler")
	name: str | None
	handler: ErrorHandler | None

	def __init__(
		self, name: str | None = None, handler: ErrorHandler | None = None
	) -> None:
		self.name = name
		self.handler = handler

	def report(
		self,
		exc: BaseException,
		*,
		code: ErrorCode,
		details: dict[str, Any] | None = None,
		message: str | None = None,
	) -> None:
		payload_details = dict(details) if details is not None else {}
		if self.name is not None:
			payload_details.setdefault("reporter", self.name)
		payload_message = message or str(exc)

		logger.error(
			"Trellis error code=%s message=%s details=%s\n%s",
			code,
			payload_message,
			payload_details,
			_format_stack(exc),
		)

		if self.handler is not None:
			try:
				self.handler(exc, code, payload_details)
			except Exception as handler_exc:
				logger.exception(
					"Error handler failed while reporting code=%s",
					code,
					exc_info=handler_exc,
				)


__all__ = [
	"ErrorCode",
	"ErrorHandler",
	"Errors",
	"EvaluationError",
	"ExpressionSyntaxError",
	"LexicalError",
	"TemplateError",
	"TrellisError",
]

"""Environment-driven configuration.

Every setting has a constructor argument that takes precedence; these
readers only supply the defaults.
"""

import os

ENV_TRELLIS_FRAME_INTERVAL = "TRELLIS_FRAME_INTERVAL"
ENV_TRELLIS_STRICT_SYMBOLS = "TRELLIS_STRICT_SYMBOLS"

DEFAULT_FRAME_INTERVAL = 1 / 60

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def frame_interval() -> float:
	raw = os.environ.get(ENV_TRELLIS_FRAME_INTERVAL)
	if raw is None or not raw.strip():
		return DEFAULT_FRAME_INTERVAL
	try:
		value = float(raw)
	except ValueError as exc:
		raise ValueError(
			f"{ENV_TRELLIS_FRAME_INTERVAL} must be a number of seconds, got {raw!r}"
		) from exc
	if value < 0 or value != value or value == float("inf"):
		raise ValueError(
			f"{ENV_TRELLIS_FRAME_INTERVAL} must be a finite, non-negative number, got {raw!r}"
		)
	return value


def strict_symbols() -> bool:
	raw = os.environ.get(ENV_TRELLIS_STRICT_SYMBOLS)
	if raw is None:
		return False
	value = raw.strip().lower()
	if value in _TRUTHY:
		return True
	if value in _FALSY:
		return False
	raise ValueError(
		f"{ENV_TRELLIS_STRICT_SYMBOLS} must be a boolean flag, got {raw!r}"
	)


__all__ = [
	"DEFAULT_FRAME_INTERVAL",
	"ENV_TRELLIS_FRAME_INTERVAL",
	"ENV_TRELLIS_STRICT_SYMBOLS",
	"frame_interval",
	"strict_symbols",
]

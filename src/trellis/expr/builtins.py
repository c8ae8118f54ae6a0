"""Names every expression can reach after its context stack is exhausted."""

from __future__ import annotations

import builtins
import json
import math
import operator
from collections.abc import Callable, Iterable
from types import MappingProxyType
from typing import Any


def _new(ctor: Callable[..., Any], args: Iterable[Any] = ()) -> Any:
	return ctor(*args)


BUILTINS: MappingProxyType[str, Any] = MappingProxyType(
	{
		"true": True,
		"false": False,
		"null": None,
		"undefined": None,
		"nan": math.nan,
		"inf": math.inf,
		# Constructors and conversions
		"len": builtins.len,
		"str": builtins.str,
		"int": builtins.int,
		"float": builtins.float,
		"bool": builtins.bool,
		"list": builtins.list,
		"dict": builtins.dict,
		"set": builtins.set,
		"range": builtins.range,
		"sorted": builtins.sorted,
		"min": builtins.min,
		"max": builtins.max,
		"abs": builtins.abs,
		"round": builtins.round,
		"new": _new,
		# Modules
		"json": json,
		"math": math,
		# Operators; the expression language has no infix syntax
		"add": operator.add,
		"sub": operator.sub,
		"mul": operator.mul,
		"div": operator.truediv,
		"mod": operator.mod,
		"eq": operator.eq,
		"ne": operator.ne,
		"lt": operator.lt,
		"le": operator.le,
		"gt": operator.gt,
		"ge": operator.ge,
		"not": operator.not_,
		"not_": operator.not_,
		"and_": lambda a, b: a and b,
		"or_": lambda a, b: a or b,
	}
)


__all__ = ["BUILTINS"]

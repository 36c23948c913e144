from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import Any

from routewire.rules.base import BaseRule
from routewire.types import ParameterDescriptor, ResolvedArguments, ValuePool

_LEADING_NUMBER = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def to_int(value: Any) -> int:
    """Cast ``value`` to ``int`` the lenient way scalar casts work.

    Numeric prefixes are parsed and truncated (``"5.9"`` -> 5,
    ``"12abc"`` -> 12) and anything without one becomes 0. This is not
    validation: ``"abc"`` silently yields 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, bytes):
        value = value.decode(errors="ignore")
    if not isinstance(value, str):
        return 1 if value else 0

    match = _LEADING_NUMBER.match(value)
    if match is None:
        return 0
    text = match.group(0).strip()
    if "." not in text and match.group(3) is None:
        return int(text)
    number = float(text)
    return int(number) if math.isfinite(number) else 0


class IdIntegerTypeRule(BaseRule):
    """Bind an ``id`` parameter to the pool's ``id`` value cast to ``int``.

    Route placeholders always arrive as strings; this rule saves handlers
    declaring ``id: int`` from casting themselves. The pool is not modified,
    so later rules still see the original string.
    """

    def resolve_parameters(
        self,
        unresolved: Sequence[ParameterDescriptor],
        pool: ValuePool,
        resolved: ResolvedArguments,
    ) -> ResolvedArguments:
        resolved = dict(resolved)
        if pool.get("id") is None:
            return resolved

        identifier = to_int(pool["id"])
        for parameter in unresolved:
            if parameter.name == "id":
                resolved[parameter.position] = identifier
        return resolved

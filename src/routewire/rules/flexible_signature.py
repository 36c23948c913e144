from __future__ import annotations

from collections.abc import Sequence

from routewire.rules.base import BaseRule
from routewire.types import ParameterDescriptor, ResolvedArguments, ValuePool


class FlexibleSignatureRule(BaseRule):
    """Bind parameters to pool values with exactly the same name.

    For a target ``(request, response, id)`` and a pool
    ``{"request": r, "response": s, "id": "1"}`` the target receives
    ``(r, s, "1")``. Matching is case-sensitive and values are passed as is.
    """

    def resolve_parameters(
        self,
        unresolved: Sequence[ParameterDescriptor],
        pool: ValuePool,
        resolved: ResolvedArguments,
    ) -> ResolvedArguments:
        resolved = dict(resolved)
        for parameter in unresolved:
            if parameter.name in pool:
                resolved[parameter.position] = pool[parameter.name]
        return resolved

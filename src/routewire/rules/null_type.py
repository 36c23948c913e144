from __future__ import annotations

from collections.abc import Sequence

from routewire.rules.base import BaseRule
from routewire.types import NullableType, ParameterDescriptor, ResolvedArguments, ValuePool


class NullTypeRule(BaseRule):
    """Pass ``None`` to parameters explicitly annotated as nullable.

    Parameters with a default value are left to the target. Untyped
    parameters do not qualify. Meant to be the last rule of a chain.
    """

    def resolve_parameters(
        self,
        unresolved: Sequence[ParameterDescriptor],
        pool: ValuePool,
        resolved: ResolvedArguments,
    ) -> ResolvedArguments:
        resolved = dict(resolved)
        for parameter in unresolved:
            if parameter.has_default:
                continue
            if isinstance(parameter.type, NullableType):
                resolved[parameter.position] = None
        return resolved

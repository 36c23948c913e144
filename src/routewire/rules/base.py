from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from routewire.locator import ServiceLocator
from routewire.types import ParameterDescriptor, ResolvedArguments, ValuePool


@runtime_checkable
class ResolutionRule(Protocol):
    """Capability shared by every rule in a chain.

    A rule receives the parameters that are still unresolved, the value pool
    and the bindings accumulated by earlier rules. It returns the accumulated
    bindings plus whatever it could bind itself. Rules only add positions of
    the parameters they were given.
    """

    def resolve_parameters(
        self,
        unresolved: Sequence[ParameterDescriptor],
        pool: ValuePool,
        resolved: ResolvedArguments,
    ) -> ResolvedArguments:
        """Bind zero or more of ``unresolved`` and return the updated mapping.

        Args:
            unresolved: Parameters no earlier rule could bind.
            pool: Named values available for this invocation.
            resolved: Bindings produced so far, keyed by position.

        """


class BaseRule(ABC):
    """Base class implementing the uniform rule construction contract.

    Every rule is constructed as ``Rule(locator)`` whether it uses the locator
    or not. Rules hold no per-request state, so one instance may serve
    concurrent invocations.
    """

    def __init__(self, locator: ServiceLocator) -> None:
        self.locator = locator

    @abstractmethod
    def resolve_parameters(
        self,
        unresolved: Sequence[ParameterDescriptor],
        pool: ValuePool,
        resolved: ResolvedArguments,
    ) -> ResolvedArguments:
        """Bind zero or more of ``unresolved`` and return the updated mapping."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def is_rule_class(candidate: Any) -> bool:
    """Return whether ``candidate`` is a class whose instances can resolve parameters."""
    return isinstance(candidate, type) and callable(getattr(candidate, "resolve_parameters", None))

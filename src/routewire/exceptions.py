from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from routewire.types import ParameterDescriptor


class RoutewireError(Exception):
    """Represent a base class for all routewire-specific failures.

    Catch this type when you want to handle any routewire error path without
    matching each concrete exception class individually.
    """


class InvalidConfigurationError(RoutewireError):
    """Signal an invalid rule chain configuration.

    Raised by ``RuleChainResolver`` construction when a configured rule
    identifier is not a class or a dotted path that imports to a class.

    Typical fixes include passing rule classes instead of rule instances and
    checking the spelling of dotted paths in ``ROUTEWIRE_RULES``.
    """


class InvalidRuleError(RoutewireError):
    """Signal a configured rule that cannot resolve parameters.

    Raised by ``RuleChainResolver.resolve`` on the first invocation that
    reaches a rule whose class (or located instance) does not provide
    ``resolve_parameters``.

    Typical fix is subclassing ``BaseRule`` or implementing the
    ``ResolutionRule`` protocol.
    """


class UnresolvedParametersError(RoutewireError):
    """Signal that required parameters are left without a value.

    Raised by ``RuleChainResolver.resolve`` after the whole rule chain ran and
    one or more parameters without a default value (and not variadic) are
    still unbound. ``missing`` holds their descriptors.

    Typical fixes include adding a route placeholder or request attribute with
    the parameter name, registering the parameter type in the service locator,
    declaring the parameter as optional, or adding a rule to the chain.
    """

    def __init__(self, missing: tuple[ParameterDescriptor, ...]) -> None:
        self.missing = missing
        noun = "parameters" if len(missing) > 1 else "parameter"
        details = ", ".join(descriptor.display() for descriptor in missing)
        super().__init__(
            f"Unable to invoke the callable because no value was given for {noun} ({details})",
        )


class CallableInspectionError(RoutewireError):
    """Signal a target whose parameters cannot be described.

    Raised by ``CallableInspector.inspect_callable`` when the target is not
    callable or Python cannot produce a signature for it (some builtins).
    """

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from routewire.http import HttpRequest, build_value_pool
from routewire.locator import ServiceLocator
from routewire.resolver import RuleChainResolver, RuleIdentifier
from routewire.signature import CallableInspector
from routewire.types import ParameterDescriptor, ParameterKind, ResolvedArguments

logger = logging.getLogger(__name__)

_POSITIONAL_KINDS = {ParameterKind.POSITIONAL_ONLY, ParameterKind.POSITIONAL_OR_KEYWORD}


class InvocationAdapter:
    """Call a target with arguments bound by position.

    Positions without a binding are left to the target's own defaults. Once a
    position is skipped, later positional parameters are passed by keyword so
    they still land on the right parameter. A bound ``*args`` value is passed
    as one extra positional argument. ``*args`` and positional-only parameters
    bound after a gap raise ``TypeError``. A bound ``**kwargs`` value must be a
    mapping and is merged into the keywords.
    """

    def build_call_arguments(
        self,
        descriptors: Sequence[ParameterDescriptor],
        resolved: ResolvedArguments,
    ) -> tuple[list[Any], dict[str, Any]]:
        """Split resolved values into positional and keyword arguments.

        Args:
            descriptors: Parameters of the target.
            resolved: Values keyed by parameter position.

        """
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        skipped = False

        for descriptor in sorted(descriptors, key=lambda item: item.position):
            if descriptor.position not in resolved:
                skipped = skipped or descriptor.kind in _POSITIONAL_KINDS
                continue
            value = resolved[descriptor.position]
            if descriptor.kind is ParameterKind.VAR_KEYWORD:
                kwargs.update(value)
            elif descriptor.kind is ParameterKind.KEYWORD_ONLY:
                kwargs[descriptor.name] = value
            elif descriptor.kind is ParameterKind.VAR_POSITIONAL and skipped:
                msg = (
                    f"Cannot pass '*{descriptor.name}' after an unbound positional "
                    "parameter; bind every preceding parameter or drop the variadic value."
                )
                raise TypeError(msg)
            elif descriptor.kind is ParameterKind.POSITIONAL_ONLY and skipped:
                msg = (
                    f"Cannot pass positional-only parameter '{descriptor.name}' after an "
                    "unbound positional parameter; bind every preceding parameter."
                )
                raise TypeError(msg)
            elif descriptor.kind is ParameterKind.VAR_POSITIONAL or not skipped:
                args.append(value)
            else:
                kwargs[descriptor.name] = value
        return args, kwargs

    def invoke(
        self,
        target: Any,
        descriptors: Sequence[ParameterDescriptor],
        resolved: ResolvedArguments,
    ) -> Any:
        """Invoke ``target`` with ``resolved`` and return its result.

        Args:
            target: Callable already normalized by ``CallableInspector``.
            descriptors: Parameters of the target.
            resolved: Values keyed by parameter position.

        """
        args, kwargs = self.build_call_arguments(descriptors, resolved)
        return target(*args, **kwargs)


class RouteInvocationStrategy:
    """Invoke route handlers with arguments resolved by a rule chain.

    This is the entry point a web framework calls for each matched route:
    it assembles the value pool from the request, the response, the route
    placeholders and the request attributes, resolves the handler arguments
    and calls the handler.

    Examples:
        .. code-block:: python

            registry = ServiceRegistry()
            strategy = RouteInvocationStrategy(registry, [IdIntegerTypeRule, FlexibleSignatureRule])

            def show_user(response, id: int) -> Response: ...

            strategy(show_user, request, response, {"id": "5"})

    """

    def __init__(
        self,
        locator: ServiceLocator,
        rules: Sequence[RuleIdentifier] = (),
        *,
        resolver: RuleChainResolver | None = None,
        adapter: InvocationAdapter | None = None,
    ) -> None:
        """Configure the strategy.

        Args:
            locator: Service locator used by the rules.
            rules: Rule classes or dotted paths, in chain order. Ignored when
                ``resolver`` is given.
            resolver: Preconfigured resolver.
            adapter: Invocation adapter, mainly for tests.

        """
        self.resolver = resolver or RuleChainResolver(locator, rules)
        self.adapter = adapter or InvocationAdapter()

    @property
    def inspector(self) -> CallableInspector:
        return self.resolver.inspector

    def __call__(
        self,
        target: Any,
        request: HttpRequest,
        response: Any,
        route_arguments: Mapping[str, Any] | None = None,
    ) -> Any:
        """Resolve the handler arguments and invoke it.

        Args:
            target: Route handler, any target supported by ``CallableInspector``.
            request: Current server request.
            response: Response object offered to the handler.
            route_arguments: Values captured from route placeholders.

        Raises:
            UnresolvedParametersError: If a required handler parameter has no value.

        """
        pool = build_value_pool(request, response, route_arguments)
        handler = self.inspector.normalize_target(target)
        descriptors = self.inspector.inspect_callable(handler)
        resolved = self.resolver.resolve(descriptors, pool)
        logger.debug(
            "Invoking %s with %d resolved argument(s)",
            getattr(handler, "__qualname__", type(handler).__qualname__),
            len(resolved),
        )
        return self.adapter.invoke(handler, descriptors, resolved)

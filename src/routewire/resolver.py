from __future__ import annotations

import importlib
import logging
from collections.abc import Sequence
from typing import Any

from routewire.exceptions import (
    InvalidConfigurationError,
    InvalidRuleError,
    UnresolvedParametersError,
)
from routewire.locator import ServiceLocator
from routewire.rules.base import ResolutionRule, is_rule_class
from routewire.rules.flexible_signature import FlexibleSignatureRule
from routewire.rules.null_type import NullTypeRule
from routewire.rules.type_hint_container import TypeHintContainerRule
from routewire.settings import RoutewireSettings
from routewire.signature import CallableInspector
from routewire.types import ParameterDescriptor, ResolvedArguments, ValuePool

logger = logging.getLogger(__name__)

RuleIdentifier = type[Any] | str

DEFAULT_RULES: tuple[type[Any], ...] = (
    FlexibleSignatureRule,
    TypeHintContainerRule,
    NullTypeRule,
)


def import_rule(path: str) -> Any:
    """Import the object named by ``package.module:Name`` or ``package.module.Name``.

    Args:
        path: Dotted path of the rule class.

    """
    module_name, separator, attribute = path.partition(":")
    if not separator:
        module_name, _, attribute = path.rpartition(".")
    if not module_name or not attribute:
        msg = f"Resolution rule path '{path}' must name a module and a class."
        raise InvalidConfigurationError(msg)

    try:
        module = importlib.import_module(module_name)
    except ImportError as error:
        msg = f"Resolution rule module '{module_name}' cannot be imported: {error}"
        raise InvalidConfigurationError(msg) from error

    try:
        return getattr(module, attribute)
    except AttributeError as error:
        msg = f"Resolution rule '{attribute}' is not defined in module '{module_name}'."
        raise InvalidConfigurationError(msg) from error


class RuleChainResolver:
    """Resolve callable arguments by running an ordered chain of rules.

    Rules run in configured order, each one receiving only the parameters
    that are still unresolved. The chain stops as soon as every parameter is
    bound, so later rules (such as body parsing in ``MakeDtoRule``) are skipped
    when they are not needed. Parameters left without a value and without a
    default raise ``UnresolvedParametersError``.

    The rule configuration is fixed at construction; rule instances are
    fetched from the locator or created per call as ``Rule(locator)``.
    """

    def __init__(
        self,
        locator: ServiceLocator,
        rules: Sequence[RuleIdentifier] = (),
        *,
        inspector: CallableInspector | None = None,
    ) -> None:
        """Validate the rule configuration.

        Args:
            locator: Service locator passed to every rule and used to fetch
                rule instances registered under their class.
            rules: Rule classes or dotted paths, in chain order. Empty selects
                ``FlexibleSignatureRule, TypeHintContainerRule, NullTypeRule``.
            inspector: Callable inspector used by ``resolve_callable``.

        Raises:
            InvalidConfigurationError: If an identifier is not a class or a
                dotted path to one.

        """
        if isinstance(rules, str):
            msg = "Resolution rules must be a sequence of identifiers, not a single string."
            raise InvalidConfigurationError(msg)

        self._locator = locator
        self._rules: tuple[type[Any], ...] = (
            tuple(self._validate_identifier(rule) for rule in rules) if rules else DEFAULT_RULES
        )
        self._inspector = inspector or CallableInspector()

    @classmethod
    def from_settings(
        cls,
        locator: ServiceLocator,
        settings: RoutewireSettings | None = None,
    ) -> RuleChainResolver:
        """Build a resolver from ``RoutewireSettings`` (read from the environment by default).

        Args:
            locator: Service locator passed to every rule.
            settings: Explicit settings; a fresh ``RoutewireSettings()`` when omitted.

        """
        settings = settings or RoutewireSettings()
        resolver = cls(locator, settings.rules)
        logger.info("Built rule chain from settings: %s", ", ".join(resolver.rule_names))
        return resolver

    @property
    def rules(self) -> tuple[type[Any], ...]:
        return self._rules

    @property
    def rule_names(self) -> list[str]:
        return [rule.__name__ for rule in self._rules]

    @property
    def inspector(self) -> CallableInspector:
        return self._inspector

    def resolve(
        self,
        descriptors: Sequence[ParameterDescriptor],
        pool: ValuePool,
    ) -> ResolvedArguments:
        """Bind values to ``descriptors`` from ``pool``.

        Args:
            descriptors: Parameters of the target, in any order.
            pool: Named values available for this invocation.

        Returns:
            Bound values keyed by position, in ascending position order.
            Parameters satisfied by their own default or by being variadic
            are absent.

        Raises:
            InvalidRuleError: If a configured rule cannot resolve parameters.
            UnresolvedParametersError: If a required parameter stays unbound.

        """
        resolved: ResolvedArguments = {}
        unresolved = list(descriptors)

        for rule_class in self._rules:
            if not unresolved:
                logger.debug("All parameters resolved, skipping %s", rule_class.__name__)
                break
            rule = self._instantiate(rule_class)
            previous = resolved
            resolved = dict(rule.resolve_parameters(tuple(unresolved), pool, resolved))
            self._warn_on_overwrites(rule_class, previous, resolved)
            unresolved = [
                descriptor for descriptor in descriptors if descriptor.position not in resolved
            ]
            logger.debug(
                "%s resolved %d parameter(s), %d left",
                rule_class.__name__,
                len(resolved) - len(previous),
                len(unresolved),
            )

        missing = tuple(descriptor for descriptor in unresolved if descriptor.is_required)
        if missing:
            raise UnresolvedParametersError(missing)

        return dict(sorted(resolved.items()))

    def resolve_callable(self, target: Any, pool: ValuePool) -> ResolvedArguments:
        """Inspect ``target`` and resolve its parameters from ``pool``.

        Args:
            target: Any target supported by ``CallableInspector``.
            pool: Named values available for this invocation.

        """
        return self.resolve(self._inspector.inspect_callable(target), pool)

    def _instantiate(self, rule_class: type[Any]) -> ResolutionRule:
        if self._locator.has(rule_class):
            rule = self._locator.get(rule_class)
        elif is_rule_class(rule_class):
            rule = rule_class(self._locator)
        else:
            rule = None

        if not isinstance(rule, ResolutionRule):
            msg = (
                f"The {rule_class.__qualname__} rule must implement ResolutionRule "
                "(define resolve_parameters)."
            )
            raise InvalidRuleError(msg)
        return rule

    def _validate_identifier(self, identifier: Any) -> type[Any]:
        candidate = import_rule(identifier) if isinstance(identifier, str) else identifier
        if not isinstance(candidate, type):
            msg = (
                "Resolution rule must be declared as an existing class or a dotted path "
                f"to one, got {identifier!r}."
            )
            raise InvalidConfigurationError(msg)
        return candidate

    def _warn_on_overwrites(
        self,
        rule_class: type[Any],
        previous: ResolvedArguments,
        resolved: ResolvedArguments,
    ) -> None:
        overwritten = [
            position
            for position, value in previous.items()
            if position in resolved and resolved[position] is not value
        ]
        if overwritten:
            logger.warning(
                "%s re-bound already resolved position(s) %s",
                rule_class.__name__,
                overwritten,
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rules=[{', '.join(self.rule_names)}])"

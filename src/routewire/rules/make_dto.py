from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from routewire.dto import Dto
from routewire.http import MUTATING_METHODS
from routewire.rules.base import BaseRule
from routewire.settings import RoutewireSettings
from routewire.types import ParameterDescriptor, ResolvedArguments, ValuePool

logger = logging.getLogger(__name__)

_DTO_NAME = re.compile("dto", re.IGNORECASE)


class MakeDtoRule(BaseRule):
    """Turn the body of POST, PUT and PATCH requests into DTOs.

    Every unresolved parameter whose name contains ``dto`` (any case) gets a
    DTO built from the parsed body. A typed DTO is produced when the locator
    holds a ``dtoFactories`` mapping that names a registered factory for the
    parameter; otherwise a plain ``Dto`` record carries the body fields.

    Examples:
        .. code-block:: python

            registry.set(UserUpdateFactory, UserUpdateFactory())
            registry.set("dtoFactories", {"dto": UserUpdateFactory})

    """

    def resolve_parameters(
        self,
        unresolved: Sequence[ParameterDescriptor],
        pool: ValuePool,
        resolved: ResolvedArguments,
    ) -> ResolvedArguments:
        resolved = dict(resolved)
        request = pool.get("request")
        if request is None or str(request.method).upper() not in MUTATING_METHODS:
            return resolved

        settings = self._settings()
        payload = dict(request.get_parsed_body() or {})
        payload.pop(settings.method_override_field, None)

        for parameter in unresolved:
            if _DTO_NAME.search(parameter.name):
                resolved[parameter.position] = self._make_dto(parameter.name, payload, settings)
        return resolved

    def _make_dto(
        self,
        parameter_name: str,
        payload: Mapping[str, Any],
        settings: RoutewireSettings,
    ) -> Any:
        factories: Mapping[str, Any] = {}
        if self.locator.has(settings.dto_factories_key):
            factories = self.locator.get(settings.dto_factories_key)

        factory_key = factories.get(parameter_name)
        if factory_key is not None and self.locator.has(factory_key):
            logger.debug("Building '%s' with DTO factory %r", parameter_name, factory_key)
            return self.locator.get(factory_key)(payload)
        return Dto(payload)

    def _settings(self) -> RoutewireSettings:
        if self.locator.has(RoutewireSettings):
            return self.locator.get(RoutewireSettings)
        return RoutewireSettings()

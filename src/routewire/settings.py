from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RoutewireSettings(BaseSettings):
    """Environment-driven configuration for a rule chain.

    ``ROUTEWIRE_RULES`` takes a JSON list of dotted rule paths, for example
    ``'["routewire.rules:IdIntegerTypeRule", "routewire.rules:FlexibleSignatureRule"]'``.
    An empty list selects the default chain.

    ``MakeDtoRule`` uses an instance registered in the service locator under
    ``RoutewireSettings`` and otherwise reads the DTO options from the
    environment on each call.
    """

    model_config = SettingsConfigDict(env_prefix="ROUTEWIRE_", frozen=True)

    rules: list[str] = Field(default_factory=list)
    """Dotted paths of rule classes, in chain order."""

    dto_factories_key: str = "dtoFactories"
    """Locator key of the parameter-name to factory-key mapping."""

    method_override_field: str = "_METHOD"
    """Body field carrying an HTTP method override, dropped from DTO payloads."""

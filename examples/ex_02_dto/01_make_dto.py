"""Focused example: request bodies as generic and pydantic-backed DTOs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from routewire import MakeDtoRule, PydanticDtoFactory, RouteInvocationStrategy, ServiceRegistry


@dataclass
class Request:
    method: str
    body: Mapping[str, Any]

    def get_parsed_body(self) -> Mapping[str, Any] | None:
        return self.body

    def get_attributes(self) -> Mapping[str, Any]:
        return {}


class ProfileUpdate(BaseModel):
    name: str
    age: int


def update_profile(dto: Any) -> str:
    return f"{type(dto).__name__}: {dto.name} ({dto.age!r})"


def main() -> None:
    request = Request("PATCH", {"name": "Alex", "age": "31", "_METHOD": "PATCH"})

    registry = ServiceRegistry()
    strategy = RouteInvocationStrategy(registry, [MakeDtoRule])
    print(strategy(update_profile, request, None))  # => Dto: Alex ('31')

    registry.set("profile_factory", PydanticDtoFactory(ProfileUpdate))
    registry.set("dtoFactories", {"dto": "profile_factory"})
    print(strategy(update_profile, request, None))  # => ProfileUpdate: Alex (31)


if __name__ == "__main__":
    main()

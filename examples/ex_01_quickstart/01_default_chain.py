"""Focused example: the default rule chain binding a route handler."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from routewire import RouteInvocationStrategy, ServiceRegistry


@dataclass
class Request:
    method: str = "GET"
    attributes: dict[str, Any] = field(default_factory=dict)

    def get_parsed_body(self) -> Mapping[str, Any] | None:
        return None

    def get_attributes(self) -> Mapping[str, Any]:
        return self.attributes


class Mailer:
    def send(self, to: str) -> str:
        return f"sent to {to}"


def notify_user(id: str, mailer: Mailer, locale: str | None, retries: int = 3) -> str:  # noqa: A002
    return f"{mailer.send(id)} locale={locale} retries={retries}"


def main() -> None:
    registry = ServiceRegistry().set(Mailer, Mailer())
    strategy = RouteInvocationStrategy(registry)

    result = strategy(notify_user, Request(), response=None, route_arguments={"id": "42"})
    print(result)  # => sent to 42 locale=None retries=3


if __name__ == "__main__":
    main()

"""Focused example: opting into integer ``id`` placeholders."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from routewire import (
    FlexibleSignatureRule,
    IdIntegerTypeRule,
    RouteInvocationStrategy,
    ServiceRegistry,
)


class Request:
    method = "GET"

    def get_parsed_body(self) -> Mapping[str, Any] | None:
        return None

    def get_attributes(self) -> Mapping[str, Any]:
        return {}


def show_article(id: int, response: object) -> str:  # noqa: A002
    return f"article #{id} ({type(id).__name__})"


def main() -> None:
    strategy = RouteInvocationStrategy(
        ServiceRegistry(),
        [IdIntegerTypeRule, FlexibleSignatureRule],
    )

    print(strategy(show_article, Request(), "response", {"id": "7"}))  # => article #7 (int)


if __name__ == "__main__":
    main()

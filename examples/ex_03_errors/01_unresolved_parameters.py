"""Focused example: diagnosing parameters no rule could bind."""

from __future__ import annotations

from routewire import RuleChainResolver, ServiceRegistry, UnresolvedParametersError


def delete_package(package: str, force: bool, dry_run: bool = False) -> None: ...


def main() -> None:
    resolver = RuleChainResolver(ServiceRegistry())

    try:
        resolver.resolve_callable(delete_package, {"package": "routewire"})
    except UnresolvedParametersError as error:
        missing = [descriptor.name for descriptor in error.missing]
        print(error)  # => Unable to invoke the callable because no value was given for parameter (force: bool)

    print(f"missing={missing}")  # => missing=['force']


if __name__ == "__main__":
    main()

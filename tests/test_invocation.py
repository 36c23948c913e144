from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from routewire.dto import Dto
from routewire.exceptions import CallableInspectionError, UnresolvedParametersError
from routewire.http import build_value_pool
from routewire.invocation import InvocationAdapter, RouteInvocationStrategy
from routewire.locator import ServiceRegistry
from routewire.rules import IdIntegerTypeRule, MakeDtoRule, TypeHintContainerRule
from routewire.types import BuiltinType, NullableType, ParameterDescriptor, ParameterKind
from tests.mocks import (
    FakeRequest,
    FakeResponse,
    InvokableHandler,
    Mailer,
    StaticHandler,
    UserController,
    UserUpdateDto,
    UserUpdateDtoFactory,
    usual_func,
)

if TYPE_CHECKING:
    from tests.mocks import Clock

ROUTE_ARGUMENTS = {"id": "5"}


def show_with_deferred_import(
    response: FakeResponse,
    id: str,  # noqa: A002
    name: str | None,
    clock: Clock | None = None,
) -> FakeResponse:
    return response.write([id, name, clock])


@pytest.fixture()
def strategy(registry: ServiceRegistry) -> RouteInvocationStrategy:
    return RouteInvocationStrategy(registry)


def test_build_value_pool_merges_sources_and_strips_reserved_keys(
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    request_double.attributes.update({"id": "attribute", "__basePath__": "/", "response": "x"})

    pool = build_value_pool(request_double, response_double, ROUTE_ARGUMENTS)

    assert pool["request"] is request_double
    assert pool["response"] is response_double
    assert pool["id"] == "5"
    assert pool["test"] == "someValue"
    assert "__route__" not in pool
    assert "__basePath__" not in pool


def test_closure_with_default_chain(
    strategy: RouteInvocationStrategy,
    registry: ServiceRegistry,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    mailer = Mailer()
    registry.set(Mailer, mailer)

    def handler(
        request: FakeRequest,
        response: FakeResponse,
        id: str,  # noqa: A002
        test: str,
        mailer: Mailer,
        name: str | None,
        count: int | None = 5,
    ) -> FakeResponse:
        return response.write([request, id, test, mailer, name, count])

    result = strategy(handler, request_double, response_double, ROUTE_ARGUMENTS)

    assert result is response_double
    assert response_double.body == [[request_double, "5", "someValue", mailer, None, 5]]


def test_plain_function_with_variadic(
    strategy: RouteInvocationStrategy,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    strategy(usual_func, request_double, response_double, ROUTE_ARGUMENTS)

    assert response_double.body == [["someValue", True, ()]]


def test_static_method_pair(
    strategy: RouteInvocationStrategy,
    registry: ServiceRegistry,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    mailer = Mailer()
    registry.set(Mailer, mailer)

    strategy((StaticHandler, "handle"), request_double, response_double, ROUTE_ARGUMENTS)

    assert response_double.body == [[mailer, None]]


def test_class_method_and_bound_method(
    strategy: RouteInvocationStrategy,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    strategy((StaticHandler, "build"), request_double, response_double, ROUTE_ARGUMENTS)
    strategy(UserController("admin").show, request_double, response_double, ROUTE_ARGUMENTS)

    assert response_double.body == [[StaticHandler, "5"], "admin:5"]


def test_invokable_object_with_self_reference(
    strategy: RouteInvocationStrategy,
    registry: ServiceRegistry,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    handler = InvokableHandler()
    registry.set(InvokableHandler, handler)

    result = strategy(handler, request_double, response_double, ROUTE_ARGUMENTS)

    assert result == ["someValue", "5", handler, "example"]


def test_id_integer_type_rule(
    registry: ServiceRegistry,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    strategy = RouteInvocationStrategy(registry, [IdIntegerTypeRule])

    result = strategy(lambda id: id, request_double, response_double, ROUTE_ARGUMENTS)  # noqa: A006

    assert result == 5
    assert isinstance(result, int)


def test_make_dto_rule_without_factory(
    registry: ServiceRegistry,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    strategy = RouteInvocationStrategy(registry, [MakeDtoRule])

    def handler(dto: Dto) -> Dto:
        return dto

    dto = strategy(handler, request_double, response_double, ROUTE_ARGUMENTS)

    assert type(dto) is Dto
    assert (dto.name, dto.email) == ("Alex", "email@email.com")


def test_make_dto_rule_with_factory(
    registry: ServiceRegistry,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    registry.set("dtoFactories", {"dto": UserUpdateDtoFactory})
    registry.set(UserUpdateDtoFactory, UserUpdateDtoFactory())
    strategy = RouteInvocationStrategy(registry, [MakeDtoRule])

    def handler(dto: UserUpdateDto) -> UserUpdateDto:
        return dto

    dto = strategy(handler, request_double, response_double, ROUTE_ARGUMENTS)

    assert isinstance(dto, UserUpdateDto)
    assert type(dto.date).__name__ == "datetime"
    assert isinstance(dto.phoneType, int)
    assert isinstance(dto.isActive, bool)


def test_not_enough_parameters(
    strategy: RouteInvocationStrategy,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    def handler(response: FakeResponse, package: str) -> FakeResponse:
        return response

    with pytest.raises(UnresolvedParametersError, match=r"parameter \(package: str\)"):
        strategy(handler, request_double, response_double, ROUTE_ARGUMENTS)


def test_union_typed_parameter_is_not_injected(
    registry: ServiceRegistry,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    registry.set(Mailer, Mailer())
    strategy = RouteInvocationStrategy(registry, [TypeHintContainerRule])

    def handler(id: str, service: Mailer | InvokableHandler) -> None: ...  # noqa: A002

    with pytest.raises(UnresolvedParametersError):
        strategy(handler, request_double, response_double, ROUTE_ARGUMENTS)


def test_non_callable_target(
    strategy: RouteInvocationStrategy,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    with pytest.raises(CallableInspectionError):
        strategy("callable", request_double, response_double, ROUTE_ARGUMENTS)


def test_annotations_imported_only_for_type_checking(
    strategy: RouteInvocationStrategy,
    response_double: FakeResponse,
) -> None:
    descriptors = strategy.inspector.inspect_callable(show_with_deferred_import)

    assert [descriptor.type for descriptor in descriptors[1:3]] == [
        BuiltinType(str),
        NullableType(BuiltinType(str)),
    ]

    request = FakeRequest(method="GET")

    result = strategy(show_with_deferred_import, request, response_double, ROUTE_ARGUMENTS)

    assert result is response_double
    assert response_double.body == [["5", None, None]]


def test_handler_errors_propagate(
    strategy: RouteInvocationStrategy,
    request_double: FakeRequest,
    response_double: FakeResponse,
) -> None:
    def handler(id: str) -> None:  # noqa: A002
        raise LookupError(id)

    with pytest.raises(LookupError, match="5"):
        strategy(handler, request_double, response_double, ROUTE_ARGUMENTS)


class TestInvocationAdapter:
    @staticmethod
    def _descriptor(position: int, name: str, kind: ParameterKind, **flags: Any) -> ParameterDescriptor:
        return ParameterDescriptor(position=position, name=name, kind=kind, **flags)

    def test_skipped_default_switches_to_keywords(self) -> None:
        def target(a: int, b: int = 2, c: int = 3) -> tuple[int, int, int]:
            return a, b, c

        descriptors = [
            self._descriptor(0, "a", ParameterKind.POSITIONAL_OR_KEYWORD),
            self._descriptor(1, "b", ParameterKind.POSITIONAL_OR_KEYWORD, has_default=True),
            self._descriptor(2, "c", ParameterKind.POSITIONAL_OR_KEYWORD, has_default=True),
        ]

        args, kwargs = InvocationAdapter().build_call_arguments(descriptors, {0: 1, 2: 30})

        assert (args, kwargs) == ([1], {"c": 30})
        assert InvocationAdapter().invoke(target, descriptors, {0: 1, 2: 30}) == (1, 2, 30)

    def test_keyword_only_and_var_keyword(self) -> None:
        def target(a: int, *, flag: bool = False, **extra: Any) -> tuple[Any, ...]:
            return a, flag, extra

        descriptors = [
            self._descriptor(0, "a", ParameterKind.POSITIONAL_OR_KEYWORD),
            self._descriptor(1, "flag", ParameterKind.KEYWORD_ONLY, has_default=True),
            self._descriptor(2, "extra", ParameterKind.VAR_KEYWORD, is_variadic=True),
        ]

        result = InvocationAdapter().invoke(target, descriptors, {0: 1, 1: True, 2: {"x": 1}})

        assert result == (1, True, {"x": 1})

    def test_variadic_after_gap_is_rejected(self) -> None:
        descriptors = [
            self._descriptor(0, "a", ParameterKind.POSITIONAL_OR_KEYWORD),
            self._descriptor(1, "b", ParameterKind.POSITIONAL_OR_KEYWORD, has_default=True),
            self._descriptor(2, "rest", ParameterKind.VAR_POSITIONAL, is_variadic=True),
        ]

        with pytest.raises(TypeError, match=r"\*rest"):
            InvocationAdapter().build_call_arguments(descriptors, {0: 1, 2: "tail"})

    def test_positional_only_after_gap_is_rejected(self) -> None:
        def target(a: Any = None, b: str = "x", /) -> tuple[Any, str]:
            return a, b

        descriptors = [
            self._descriptor(0, "a", ParameterKind.POSITIONAL_ONLY, has_default=True),
            self._descriptor(1, "b", ParameterKind.POSITIONAL_ONLY, has_default=True),
        ]

        with pytest.raises(TypeError, match="positional-only parameter 'b'"):
            InvocationAdapter().invoke(target, descriptors, {1: "y"})
        assert InvocationAdapter().invoke(target, descriptors, {0: 1, 1: "y"}) == (1, "y")

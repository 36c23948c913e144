from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


class Dto:
    """Untyped data transfer object built from request body fields.

    Each field becomes an attribute, in body order. Used by ``MakeDtoRule``
    when no factory is configured for a parameter. Fields are written to the
    instance namespace directly, so body fields such as ``__class__`` never
    replace object internals. The class defines no public methods that a
    field could shadow; use ``dto_fields`` to read every field.

    Examples:
        .. code-block:: python

            dto = Dto({"name": "Alex", "email": "e@x.com"})
            dto.name  # "Alex"
            dto_fields(dto)  # {"name": "Alex", "email": "e@x.com"}

    """

    def __init__(self, fields: Mapping[Any, Any] | None = None, /, **extra: Any) -> None:
        vars(self).update(
            (str(field_name), value) for field_name, value in {**dict(fields or {}), **extra}.items()
        )

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(dto_fields(self).items())

    def __contains__(self, field_name: object) -> bool:
        return field_name in vars(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dto):
            return NotImplemented
        return dto_fields(self) == dto_fields(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in dto_fields(self).items())
        return f"{type(self).__name__}({fields})"


def dto_fields(dto: Dto) -> dict[str, Any]:
    """Return a copy of the fields of ``dto`` in insertion order."""
    return dict(vars(dto))


class DtoFactory(Protocol):
    """Build a typed DTO from a request body payload."""

    def __call__(self, payload: Mapping[str, Any]) -> Any: ...


class PydanticDtoFactory(Generic[ModelT]):
    """DTO factory validating the payload into a pydantic model.

    Register an instance in the service locator and map a parameter name to
    it through ``dtoFactories``. Validation errors propagate to the caller.

    Examples:
        .. code-block:: python

            registry.set("user_factory", PydanticDtoFactory(UserUpdate))
            registry.set("dtoFactories", {"dto": "user_factory"})

    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    def __call__(self, payload: Mapping[str, Any]) -> ModelT:
        return self.model.model_validate(dict(payload))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.model.__qualname__})"

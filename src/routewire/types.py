from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias, Union

ValuePool: TypeAlias = Mapping[str, Any]
"""Named values available for binding: request, response, placeholders and attributes."""

ResolvedArguments: TypeAlias = dict[int, Any]
"""Values bound so far, keyed by parameter position."""


def _annotation_name(annotation: Any) -> str:
    if annotation is type(None):
        return "None"
    if isinstance(annotation, type):
        return annotation.__qualname__
    return repr(annotation).replace("typing.", "")


@dataclass(frozen=True, slots=True)
class BuiltinType:
    """A builtin scalar or container annotation such as ``int`` or ``list[str]``."""

    annotation: Any

    def display(self) -> str:
        return _annotation_name(self.annotation)


@dataclass(frozen=True, slots=True)
class NamedType:
    """A single non-builtin annotation, used as the service locator key."""

    identifier: Any

    def display(self) -> str:
        return _annotation_name(self.identifier)


@dataclass(frozen=True, slots=True)
class NullableType:
    """An annotation that explicitly accepts ``None``."""

    inner: TypeDescriptor

    def display(self) -> str:
        if isinstance(self.inner, BuiltinType) and self.inner.annotation is type(None):
            return "None"
        return f"{self.inner.display()} | None"


@dataclass(frozen=True, slots=True)
class UnionType:
    """A union of two or more annotations, none of which is ``None``."""

    members: tuple[TypeDescriptor, ...]

    def display(self) -> str:
        return " | ".join(member.display() for member in self.members)


TypeDescriptor: TypeAlias = Union[BuiltinType, NamedType, NullableType, UnionType]  # noqa: UP007


class ParameterKind(Enum):
    """How a parameter accepts its value when the target is invoked."""

    POSITIONAL_ONLY = "positional_only"
    POSITIONAL_OR_KEYWORD = "positional_or_keyword"
    VAR_POSITIONAL = "var_positional"
    KEYWORD_ONLY = "keyword_only"
    VAR_KEYWORD = "var_keyword"


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """Static metadata about one callable parameter.

    Descriptors are produced once per callable by ``CallableInspector`` and are
    the only view of the target that the rule chain has.
    """

    position: int
    """Zero-based position in the callable signature."""
    name: str
    """Parameter name as declared."""
    type: TypeDescriptor | None = None
    """Declared type, or ``None`` when the parameter is not annotated."""
    has_default: bool = False
    """True if the callable supplies its own default value."""
    is_variadic: bool = False
    """True for ``*args``/``**kwargs`` style parameters."""
    kind: ParameterKind = ParameterKind.POSITIONAL_OR_KEYWORD
    """Binding kind, consulted only when the target is invoked."""

    @property
    def is_required(self) -> bool:
        return not self.has_default and not self.is_variadic

    def display(self) -> str:
        """Render ``name: type`` (or just ``name``) for diagnostics."""
        if self.type is None:
            return self.name
        return f"{self.name}: {self.type.display()}"

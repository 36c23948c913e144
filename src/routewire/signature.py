from __future__ import annotations

import functools
import inspect
import logging
import threading
import types
import weakref
from collections.abc import Callable, Hashable
from inspect import Parameter
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from routewire.exceptions import CallableInspectionError
from routewire.types import (
    BuiltinType,
    NamedType,
    NullableType,
    ParameterDescriptor,
    ParameterKind,
    TypeDescriptor,
    UnionType,
)

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)
_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)
_SELF_MODULES = {"typing", "typing_extensions"}
_METHOD_PAIR_LENGTH = 2
_PARAMETER_KINDS = {
    Parameter.POSITIONAL_ONLY: ParameterKind.POSITIONAL_ONLY,
    Parameter.POSITIONAL_OR_KEYWORD: ParameterKind.POSITIONAL_OR_KEYWORD,
    Parameter.VAR_POSITIONAL: ParameterKind.VAR_POSITIONAL,
    Parameter.KEYWORD_ONLY: ParameterKind.KEYWORD_ONLY,
    Parameter.VAR_KEYWORD: ParameterKind.VAR_KEYWORD,
}


def unwrap_annotated(annotation: Any) -> Any:
    """Recursively unwrap ``Annotated[T, ...]`` into ``T``."""
    if get_origin(annotation) is not Annotated:
        return annotation
    return unwrap_annotated(get_args(annotation)[0])


def is_self_annotation(annotation: Any) -> bool:
    """Return whether ``annotation`` is ``typing.Self`` or ``typing_extensions.Self``."""
    if getattr(annotation, "__module__", None) not in _SELF_MODULES:
        return False
    name = getattr(annotation, "__qualname__", getattr(annotation, "_name", None))
    return name == "Self"


def describe_annotation(annotation: Any, owner: type[Any] | None = None) -> TypeDescriptor | None:
    """Convert a runtime annotation into a ``TypeDescriptor``.

    ``Self`` is replaced with ``owner`` so self references never reach the
    rule chain symbolically.

    Args:
        annotation: Resolved annotation value, or ``Parameter.empty``.
        owner: Class that declares the callable, if known.

    """
    if annotation is Parameter.empty:
        return None

    annotation = unwrap_annotated(annotation)
    if annotation is None or annotation is _NONE_TYPE:
        return NullableType(BuiltinType(_NONE_TYPE))
    if is_self_annotation(annotation):
        return NamedType(owner if owner is not None else annotation)
    if annotation is Any:
        return BuiltinType(annotation)

    origin = get_origin(annotation)
    if origin in _UNION_ORIGINS:
        return _describe_union(get_args(annotation), owner)

    runtime_class = origin if isinstance(origin, type) else annotation
    if isinstance(runtime_class, type) and runtime_class.__module__ == "builtins":
        return BuiltinType(annotation)
    return NamedType(annotation)


def _describe_union(args: tuple[Any, ...], owner: type[Any] | None) -> TypeDescriptor:
    members = tuple(
        describe_annotation(arg, owner) for arg in args if arg is not _NONE_TYPE
    )
    inner: TypeDescriptor = members[0] if len(members) == 1 else UnionType(members)  # type: ignore[assignment]
    if len(members) != len(args):
        return NullableType(inner)
    return inner


class CallableInspector:
    """Describe the parameters of any invocable target.

    Supported targets are functions and lambdas, bound instance and class
    methods, static methods, ``(class_or_instance, "method")`` pairs, classes
    (their constructor) and objects implementing ``__call__``.

    Descriptors are cached per underlying function (or class), keyed weakly so
    closures created per request do not accumulate.
    """

    def __init__(self) -> None:
        self._cache: weakref.WeakKeyDictionary[Any, dict[Hashable, tuple[ParameterDescriptor, ...]]]
        self._cache = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()

    def normalize_target(self, target: Any) -> Callable[..., Any]:
        """Turn a ``(class_or_instance, "method")`` pair into the method it names.

        Args:
            target: Any supported invocable target.

        """
        if (
            isinstance(target, tuple | list)
            and len(target) == _METHOD_PAIR_LENGTH
            and isinstance(target[1], str)
        ):
            holder, method_name = target
            try:
                return getattr(holder, method_name)
            except AttributeError as error:
                msg = f"{holder!r} has no method '{method_name}'."
                raise CallableInspectionError(msg) from error
        if not callable(target):
            msg = f"Target {target!r} is not callable."
            raise CallableInspectionError(msg)
        return target

    def inspect_callable(self, target: Any) -> tuple[ParameterDescriptor, ...]:
        """Return descriptors for every parameter of ``target`` in declaration order.

        Args:
            target: Any supported invocable target.

        Raises:
            CallableInspectionError: If the target is not callable or has no
                retrievable signature.

        """
        target = self.normalize_target(target)
        anchor, owner, variant = self._cache_slot(target)

        with self._lock:
            cached = self._lookup(anchor, variant)
        if cached is not None:
            return cached

        descriptors = self._build_descriptors(target, owner)
        with self._lock:
            self._store(anchor, variant, descriptors)
        return descriptors

    def _build_descriptors(
        self,
        target: Callable[..., Any],
        owner: type[Any] | None,
    ) -> tuple[ParameterDescriptor, ...]:
        try:
            signature = inspect.signature(target)
        except (TypeError, ValueError) as error:
            msg = f"Unable to read the signature of {self._target_name(target)}: {error}"
            raise CallableInspectionError(msg) from error

        annotations = self._resolved_type_hints(target, owner)
        descriptors: list[ParameterDescriptor] = []
        for position, parameter in enumerate(signature.parameters.values()):
            annotation = annotations.get(parameter.name, parameter.annotation)
            if isinstance(annotation, str):
                # Unresolvable forward reference; keep the name as the lookup key.
                type_descriptor: TypeDescriptor | None = NamedType(annotation)
            else:
                type_descriptor = describe_annotation(annotation, owner)
            descriptors.append(
                ParameterDescriptor(
                    position=position,
                    name=parameter.name,
                    type=type_descriptor,
                    has_default=parameter.default is not Parameter.empty,
                    is_variadic=parameter.kind
                    in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD),
                    kind=_PARAMETER_KINDS[parameter.kind],
                ),
            )
        return tuple(descriptors)

    def _resolved_type_hints(
        self,
        target: Callable[..., Any],
        owner: type[Any] | None,
    ) -> dict[str, Any]:
        hinted = self._hinted_function(target)
        localns = {owner.__name__: owner} if owner is not None else None
        try:
            return get_type_hints(hinted, localns=localns, include_extras=True)
        except (AttributeError, NameError, TypeError) as error:
            logger.debug(
                "Resolving annotations of %s one by one: %s",
                self._target_name(target),
                error,
            )
            return self._resolve_each_annotation(hinted, localns)

    def _resolve_each_annotation(
        self,
        hinted: Any,
        localns: dict[str, Any] | None,
    ) -> dict[str, Any]:
        """Evaluate annotations separately, keeping the raw string of those that fail."""
        function = inspect.unwrap(getattr(hinted, "__func__", hinted))
        raw_annotations = getattr(function, "__annotations__", None) or {}
        globalns = getattr(function, "__globals__", {})

        annotations: dict[str, Any] = {}
        for name, annotation in raw_annotations.items():
            if not isinstance(annotation, str):
                annotations[name] = annotation
                continue
            try:
                annotations[name] = eval(annotation, globalns, localns)  # noqa: S307
            except (AttributeError, NameError, SyntaxError, TypeError):
                annotations[name] = annotation
        return annotations

    def _hinted_function(self, target: Callable[..., Any]) -> Any:
        if inspect.isclass(target):
            return target.__init__
        if isinstance(target, functools.partial):
            return self._hinted_function(target.func)
        if inspect.isfunction(target) or inspect.ismethod(target) or inspect.isbuiltin(target):
            return target
        return type(target).__call__

    def _cache_slot(self, target: Callable[..., Any]) -> tuple[Any, type[Any] | None, Hashable]:
        """Return the weak cache anchor, the declaring class and a variant key."""
        if inspect.ismethod(target):
            bound_to = target.__self__
            owner = bound_to if isinstance(bound_to, type) else type(bound_to)
            return target.__func__, owner, ("bound", owner)
        if inspect.isclass(target):
            return target, target, "class"
        if inspect.isfunction(target) or inspect.isbuiltin(target):
            return target, None, "function"
        call = getattr(type(target), "__call__", None)
        if inspect.isfunction(call) and "__signature__" not in getattr(target, "__dict__", {}):
            return type(target), type(target), "instance"
        # partials and similar wrappers carry a per-object signature
        return target, None, "object"

    def _lookup(self, anchor: Any, variant: Hashable) -> tuple[ParameterDescriptor, ...] | None:
        try:
            return self._cache.get(anchor, {}).get(variant)
        except TypeError:
            return None

    def _store(
        self,
        anchor: Any,
        variant: Hashable,
        descriptors: tuple[ParameterDescriptor, ...],
    ) -> None:
        try:
            self._cache.setdefault(anchor, {})[variant] = descriptors
        except TypeError:
            # Builtins do not support weak references and are not cached.
            return

    def _target_name(self, target: Callable[..., Any]) -> str:
        return getattr(target, "__qualname__", repr(target))

from routewire.dto import Dto, DtoFactory, PydanticDtoFactory, dto_fields
from routewire.exceptions import (
    CallableInspectionError,
    InvalidConfigurationError,
    InvalidRuleError,
    RoutewireError,
    UnresolvedParametersError,
)
from routewire.http import HttpRequest, build_value_pool
from routewire.invocation import InvocationAdapter, RouteInvocationStrategy
from routewire.locator import ServiceLocator, ServiceRegistry
from routewire.resolver import DEFAULT_RULES, RuleChainResolver
from routewire.rules import (
    BaseRule,
    FlexibleSignatureRule,
    IdIntegerTypeRule,
    MakeDtoRule,
    NullTypeRule,
    ResolutionRule,
    TypeHintContainerRule,
)
from routewire.settings import RoutewireSettings
from routewire.signature import CallableInspector
from routewire.types import (
    BuiltinType,
    NamedType,
    NullableType,
    ParameterDescriptor,
    ParameterKind,
    UnionType,
)

__all__ = [
    "DEFAULT_RULES",
    "BaseRule",
    "BuiltinType",
    "CallableInspectionError",
    "CallableInspector",
    "Dto",
    "DtoFactory",
    "FlexibleSignatureRule",
    "HttpRequest",
    "IdIntegerTypeRule",
    "InvalidConfigurationError",
    "InvalidRuleError",
    "InvocationAdapter",
    "MakeDtoRule",
    "NamedType",
    "NullTypeRule",
    "NullableType",
    "ParameterDescriptor",
    "ParameterKind",
    "PydanticDtoFactory",
    "ResolutionRule",
    "RoutewireError",
    "RoutewireSettings",
    "RouteInvocationStrategy",
    "RuleChainResolver",
    "ServiceLocator",
    "ServiceRegistry",
    "TypeHintContainerRule",
    "UnionType",
    "UnresolvedParametersError",
    "build_value_pool",
    "dto_fields",
]

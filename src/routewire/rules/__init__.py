from routewire.rules.base import BaseRule, ResolutionRule
from routewire.rules.flexible_signature import FlexibleSignatureRule
from routewire.rules.id_integer_type import IdIntegerTypeRule
from routewire.rules.make_dto import MakeDtoRule
from routewire.rules.null_type import NullTypeRule
from routewire.rules.type_hint_container import TypeHintContainerRule

__all__ = [
    "BaseRule",
    "FlexibleSignatureRule",
    "IdIntegerTypeRule",
    "MakeDtoRule",
    "NullTypeRule",
    "ResolutionRule",
    "TypeHintContainerRule",
]

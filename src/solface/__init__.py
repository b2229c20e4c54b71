"""
solface: Solidity interfaces from contract ABIs.

This package decodes contract ABIs, resolves their tuple parameters into
named struct definitions, and renders Solidity interface declarations.
"""

from .abi import annotate, decode, method_selector
from .compounds import (
    NamingPolicy,
    ResolutionContext,
    compound_single_value,
    find_compound_types,
    is_flat,
    resolve_compounds,
)
from .errors import DecodeError, InputError, InvalidParameterError, SolfaceError
from .interface import generate_interface
from .types import (
    Annotations,
    CompoundType,
    DecodedABI,
    ErrorItem,
    EventArgument,
    EventItem,
    FunctionItem,
    NamedValue,
    ResolvedABI,
    Value,
)
from .version import VERSION

__all__ = [
    "annotate",
    "decode",
    "method_selector",
    "NamingPolicy",
    "ResolutionContext",
    "compound_single_value",
    "find_compound_types",
    "is_flat",
    "resolve_compounds",
    "generate_interface",
    "SolfaceError",
    "DecodeError",
    "InputError",
    "InvalidParameterError",
    "Annotations",
    "CompoundType",
    "DecodedABI",
    "ErrorItem",
    "EventArgument",
    "EventItem",
    "FunctionItem",
    "NamedValue",
    "ResolvedABI",
    "Value",
    "VERSION",
]

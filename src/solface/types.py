"""Defines the core data structures and Pydantic models for solface.

This module contains the typed, in-memory representation of a contract ABI
(events, functions and errors with recursively nested parameters) together
with the structures produced when compound parameters are resolved into
named struct definitions. Field names follow the keys of the Solidity ABI
JSON format so that ABI items can be validated directly from decoded JSON.
"""
from __future__ import annotations

from typing import List, NamedTuple

from pydantic import BaseModel


class Value(BaseModel):
    """Represents a single parameter in an ABI.

    A parameter is either a scalar (``uint256``, ``address``, ``bytes32[]``,
    ...) or a compound type (a tuple/struct), in which case ``components``
    holds its members in declaration order.

    Attributes:
        name: Parameter name. May be empty, which is common for return values.
        type: The canonical ABI type, e.g. "uint256", "tuple" or "tuple[]".
        internalType: The source-level type reported by the compiler, e.g.
            "struct IDiamondCut.FacetCut[]". Empty when the ABI omits it.
        components: Nested parameters. Empty for scalar types.
    """
    name: str = ""
    type: str
    internalType: str = ""
    components: List[Value] = []

    def is_compound_type(self) -> bool:
        """Returns True if this parameter is composed of other parameters.

        Detection is purely structural: a parameter is compound if and only
        if it declares components. Arrays of scalars are not compound.
        """
        return len(self.components) > 0


class EventArgument(Value):
    """A parameter of an event, which may additionally be indexed."""
    indexed: bool = False


class FunctionItem(BaseModel):
    """Represents a smart contract method in an ABI.

    Attributes:
        type: Always "function" for decoded items.
        name: The method name.
        inputs: Method parameters in declaration order.
        outputs: Return values in declaration order.
        stateMutability: One of "pure", "view", "nonpayable" or "payable".
    """
    type: str = "function"
    name: str = ""
    inputs: List[Value] = []
    outputs: List[Value] = []
    stateMutability: str = ""


class EventItem(BaseModel):
    """Represents a log event in an ABI.

    Attributes:
        type: Always "event" for decoded items.
        name: The event name.
        inputs: Event arguments, each carrying its own ``indexed`` flag.
        anonymous: Whether the event was declared anonymous.
    """
    type: str = "event"
    name: str = ""
    inputs: List[EventArgument] = []
    anonymous: bool = False


class ErrorItem(BaseModel):
    """Represents a custom error in an ABI."""
    type: str = "error"
    name: str = ""
    inputs: List[Value] = []


class DecodedABI(BaseModel):
    """A parsed ABI, split by item kind and kept in declaration order."""
    events: List[EventItem] = []
    functions: List[FunctionItem] = []
    errors: List[ErrorItem] = []


class Annotations(BaseModel):
    """Selector annotations for an ABI.

    Attributes:
        interfaceID: The ERC-165 interface ID, i.e. the XOR of all function
            selectors.
        functionSelectors: One 4-byte selector per function, in the same
            order as ``DecodedABI.functions``.
    """
    interfaceID: bytes = b"\x00\x00\x00\x00"
    functionSelectors: List[bytes] = []


class NamedValue(BaseModel):
    """A named member of a synthesized struct."""
    name: str
    value: Value


class CompoundType(BaseModel):
    """A struct definition synthesized while resolving compound parameters.

    Attributes:
        typeName: Identifier of the struct, unique within one resolution run.
        members: The struct members in declaration order. Member types never
            refer to compound values directly; nested structs are referenced
            by the name of their own CompoundType.
    """
    typeName: str
    members: List[NamedValue] = []


class ResolvedABI(BaseModel):
    """A decoded ABI together with the struct definitions it needs.

    Attributes:
        originalABI: The ABI as it was decoded.
        compoundTypes: Every synthesized struct, innermost first within each
            parameter, in event/function/error traversal order.
        enrichedABI: Same shape as ``originalABI`` but with every compound
            parameter replaced by a reference to one of ``compoundTypes``.
    """
    originalABI: DecodedABI
    compoundTypes: List[CompoundType] = []
    enrichedABI: DecodedABI


class ItemValueIndex(NamedTuple):
    """Locates a parameter: the item's position in its kind list, then the
    parameter's position within that item."""
    item_index: int
    value_index: int

"""Resolves compound (tuple/struct) ABI parameters into named struct types.

A Solidity interface cannot spell a tuple inline: every tuple parameter has
to refer to a struct declared in the interface. This module walks every
parameter of a decoded ABI, synthesizes one struct definition per compound
parameter it meets (nested ones included, innermost first), and rewrites the
parameter to reference the synthesized struct by name.

Synthesized names take the form ``<Hint>_<n>``, where the hint is the struct
name recovered from ``internalType`` (or ``Compound`` when there is none) and
``n`` comes from a counter shared by the whole run. Structurally identical
tuples are not merged, and synthesized names are not checked against
identifiers already present in the contract: an ABI that itself declares a
struct named e.g. ``Compound_0`` can produce a colliding declaration.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Collection, List, NamedTuple, Optional, Tuple

import structlog

from solface.types import (
    CompoundType,
    DecodedABI,
    EventArgument,
    ItemValueIndex,
    NamedValue,
    ResolvedABI,
    Value,
)

logger = structlog.get_logger(__name__)

# Trailing array dimensions of an ABI type, e.g. "[]" in "tuple[]" or "[2][]".
_ARRAY_DIMENSIONS = re.compile(r"(\[\d*\])+$")

# Solidity identifiers are ASCII letters, digits, "_" and "$", not starting with a digit.
SOLIDITY_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

DEFAULT_TYPE_HINT = "Compound"
PLACEHOLDER_PREFIX = "Attribute"


class NamingPolicy(Enum):
    """Controls whether unnamed struct members receive placeholder names."""
    GENERATE_PLACEHOLDERS = "generate_placeholders"
    LEAVE_UNNAMED = "leave_unnamed"


@dataclass
class ResolutionContext:
    """Counters shared by every resolution step of one ABI.

    Both counters only ever increase, which keeps synthesized type names and
    placeholder member names unique across the whole run. Type names put an
    underscore between hint and counter, so a hint ending in digits cannot
    run into the number of another hint.
    """
    type_counter: int = 0
    name_counter: int = 0

    def next_member_name(self, taken: Collection[str] = ()) -> str:
        """Generates a fresh name for an anonymous struct member.

        Counter values whose name is in ``taken`` are skipped.
        """
        while True:
            name = f"{PLACEHOLDER_PREFIX}{self.name_counter}"
            self.name_counter += 1
            if name not in taken:
                return name

    def next_type_name(self, internal_type: str) -> str:
        """Generates a fresh struct name, using ``internal_type`` as a hint."""
        name = f"{parse_internal_type(internal_type)}_{self.type_counter}"
        self.type_counter += 1
        return name


class CompoundLocations(NamedTuple):
    """Positions of compound parameters in a decoded ABI, grouped by role."""
    event_inputs: List[ItemValueIndex]
    function_inputs: List[ItemValueIndex]
    function_outputs: List[ItemValueIndex]
    error_inputs: List[ItemValueIndex]


def parse_internal_type(internal_type: str) -> str:
    """Extracts a struct name from an ABI ``internalType``.

    For ``struct IDiamondCut.FacetCut[]`` this returns ``FacetCut``: the
    qualifying contract and any array dimensions are dropped. Anything that
    is not a struct, or whose name is not a Solidity identifier, yields
    ``Compound``.
    """
    if not internal_type.startswith("struct"):
        return DEFAULT_TYPE_HINT

    qualified_name = _ARRAY_DIMENSIONS.sub("", internal_type[len("struct"):].strip())
    name = qualified_name.split(".")[-1]
    if not SOLIDITY_IDENTIFIER.fullmatch(name):
        return DEFAULT_TYPE_HINT
    return name


def array_dimensions(abi_type: str) -> str:
    """Returns the trailing array dimensions of an ABI type ("" if none)."""
    match = _ARRAY_DIMENSIONS.search(abi_type)
    return match.group(0) if match else ""


def compound_single_value(
    value: Value,
    context: ResolutionContext,
    naming: NamingPolicy = NamingPolicy.GENERATE_PLACEHOLDERS,
) -> Tuple[Value, List[CompoundType]]:
    """Recursively creates the struct types required to represent a value.

    Args:
        value: The parameter to resolve.
        context: Counters for the current resolution run. Mutated in place.
        naming: Whether unnamed members of synthesized structs receive
            placeholder names. Return values use ``LEAVE_UNNAMED``.

    Returns:
        A pair ``(replacement, new_types)``. ``replacement`` is ``value``
        itself when it is not compound; otherwise it is a parameter with the
        same name whose type references the struct synthesized for ``value``
        (keeping any array dimensions). ``new_types`` lists every struct
        synthesized for ``value`` and its descendants, innermost first, so
        the struct for ``value`` itself always comes last.
    """
    if not value.is_compound_type():
        return value, []

    new_types: List[CompoundType] = []
    resolved_components: List[Value] = []
    for component in value.components:
        resolved, component_types = compound_single_value(component, context, naming)
        resolved_components.append(resolved)
        new_types.extend(component_types)

    type_name = context.next_type_name(value.internalType)
    members = []
    taken = {component.name for component in resolved_components if component.name}
    for component in resolved_components:
        member_name = component.name
        if not member_name and naming is NamingPolicy.GENERATE_PLACEHOLDERS:
            member_name = context.next_member_name(taken)
        members.append(NamedValue(name=member_name, value=component))
    new_types.append(CompoundType(typeName=type_name, members=members))

    replacement = Value(name=value.name, type=type_name + array_dimensions(value.type))
    return replacement, new_types


def resolve_compounds(abi: DecodedABI, context: Optional[ResolutionContext] = None) -> ResolvedABI:
    """Transitively resolves the compound parameters of every item in an ABI.

    Items are visited in a fixed order: events, then functions, then errors.
    Within a function, inputs are resolved before outputs. Synthesized types
    are accumulated in exactly that order. Return values are resolved without
    placeholder member names.

    Args:
        abi: The decoded ABI. It is not modified.
        context: Counters to use. A fresh context is created when omitted.

    Returns:
        A ResolvedABI whose ``enrichedABI`` contains no compound parameters.
    """
    if context is None:
        context = ResolutionContext()
    compound_types: List[CompoundType] = []

    def resolve(value: Value, naming: NamingPolicy = NamingPolicy.GENERATE_PLACEHOLDERS) -> Value:
        resolved, new_types = compound_single_value(value, context, naming)
        compound_types.extend(new_types)
        return resolved

    events = []
    for event in abi.events:
        inputs = []
        for argument in event.inputs:
            resolved = resolve(argument)
            inputs.append(EventArgument(
                name=resolved.name,
                type=resolved.type,
                internalType=resolved.internalType,
                components=resolved.components,
                indexed=argument.indexed,
            ))
        events.append(event.model_copy(update={"inputs": inputs}))

    functions = []
    for function in abi.functions:
        inputs = [resolve(value) for value in function.inputs]
        outputs = [resolve(value, NamingPolicy.LEAVE_UNNAMED) for value in function.outputs]
        functions.append(function.model_copy(update={"inputs": inputs, "outputs": outputs}))

    errors = []
    for error in abi.errors:
        inputs = [resolve(value) for value in error.inputs]
        errors.append(error.model_copy(update={"inputs": inputs}))

    logger.debug("compounds.resolved", compound_types=len(compound_types))
    return ResolvedABI(
        originalABI=abi,
        compoundTypes=compound_types,
        enrichedABI=DecodedABI(events=events, functions=functions, errors=errors),
    )


def find_compound_types(abi: DecodedABI) -> CompoundLocations:
    """Finds the compound parameters of a decoded ABI.

    Returns:
        The positions of compound event inputs, function inputs, function
        outputs and error inputs, in that order.
    """
    event_inputs = [
        ItemValueIndex(i, j)
        for i, event in enumerate(abi.events)
        for j, value in enumerate(event.inputs)
        if value.is_compound_type()
    ]
    function_inputs = [
        ItemValueIndex(i, j)
        for i, function in enumerate(abi.functions)
        for j, value in enumerate(function.inputs)
        if value.is_compound_type()
    ]
    function_outputs = [
        ItemValueIndex(i, k)
        for i, function in enumerate(abi.functions)
        for k, value in enumerate(function.outputs)
        if value.is_compound_type()
    ]
    error_inputs = [
        ItemValueIndex(i, j)
        for i, error in enumerate(abi.errors)
        for j, value in enumerate(error.inputs)
        if value.is_compound_type()
    ]
    return CompoundLocations(event_inputs, function_inputs, function_outputs, error_inputs)


def is_flat(abi: DecodedABI) -> bool:
    """Returns True if no parameter of the ABI is a compound type."""
    return not any(find_compound_types(abi))

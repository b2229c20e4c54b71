"""Renders Solidity interfaces from decoded ABIs.

``generate_interface`` resolves the compound parameters of an ABI into
struct definitions and renders a single ``interface`` block: structs first,
then events, functions and errors, each in ABI declaration order.
"""
from __future__ import annotations

import re
from typing import List, Optional

import structlog
from pydantic import BaseModel

from solface.compounds import SOLIDITY_IDENTIFIER, resolve_compounds
from solface.errors import InvalidParameterError
from solface.types import Annotations, CompoundType, DecodedABI, EventItem, FunctionItem, Value
from solface.version import VERSION

logger = structlog.get_logger(__name__)

_ARRAY = re.compile(r"\[\d*\]$")
_VALUE_TYPE = re.compile(r"^(u?int\d*|bytes\d+|u?fixed(\d+x\d+)?|bool|address( payable)?|function)$")

INDENT = "\t"


class InterfaceSpecification(BaseModel):
    """Specifies the Solidity interface that should be generated.

    Attributes:
        name: Name of the Solidity interface.
        abi: The ABI to render. Its parameters must already be flat.
        annotations: Interface ID and method selectors for the ABI.
        include_annotations: Whether to render the annotations as comments.
        compound_types: Struct definitions referenced by ``abi``.
        solface_version: Version string written into the header comment.
        license: SPDX license identifier. Omitted from the output when empty.
        pragma: Solidity version pragma. Omitted from the output when empty.
    """
    name: str
    abi: DecodedABI
    annotations: Annotations = Annotations()
    include_annotations: bool = False
    compound_types: List[CompoundType] = []
    solface_version: str = VERSION
    license: str = ""
    pragma: str = ""


def solidity_type_requires_location(solidity_type: str) -> bool:
    """Returns True if a parameter of this type needs a data location.

    Arrays, ``string``, ``bytes`` and structs must be declared ``memory``
    (or ``calldata``/``storage``) in function signatures; value types such as
    ``uint256``, ``bytes32``, ``bool`` and ``address`` must not.
    """
    if _ARRAY.search(solidity_type):
        return True
    if solidity_type in ("string", "bytes"):
        return True
    return not _VALUE_TYPE.match(solidity_type)


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def _function_parameter(value: Value) -> str:
    location = "memory" if solidity_type_requires_location(value.type) else ""
    return _join(value.type, location, value.name)


def _render_event(event: EventItem) -> str:
    arguments = ", ".join(
        _join(argument.type, "indexed" if argument.indexed else "", argument.name)
        for argument in event.inputs
    )
    suffix = " anonymous" if event.anonymous else ""
    return f"event {event.name}({arguments}){suffix};"


def _render_function(function: FunctionItem) -> str:
    inputs = ", ".join(_function_parameter(value) for value in function.inputs)
    signature = f"function {function.name}({inputs}) external"
    if function.stateMutability in ("view", "pure", "payable"):
        signature += f" {function.stateMutability}"
    if function.outputs:
        outputs = ", ".join(_function_parameter(value) for value in function.outputs)
        signature += f" returns ({outputs})"
    return signature + ";"


def render(spec: InterfaceSpecification) -> str:
    """Renders an interface specification as Solidity source text."""
    lines: List[str] = []
    if spec.license:
        lines.append(f"// SPDX-License-Identifier: {spec.license}")
    if spec.pragma:
        lines.append(f"pragma solidity {spec.pragma};")
    if lines:
        lines.append("")

    lines.append("// Interface generated by solface")
    lines.append(f"// solface version: {spec.solface_version}")
    if spec.include_annotations:
        lines.append(f"// Interface ID: {spec.annotations.interfaceID.hex()}")
    lines.append(f"interface {spec.name} {{")

    lines.append(f"{INDENT}// structs")
    for compound in spec.compound_types:
        lines.append(f"{INDENT}struct {compound.typeName} {{")
        for member in compound.members:
            lines.append(f"{INDENT * 2}{_join(member.value.type, member.name)};")
        lines.append(f"{INDENT}}}")

    lines.append("")
    lines.append(f"{INDENT}// events")
    for event in spec.abi.events:
        lines.append(INDENT + _render_event(event))

    lines.append("")
    lines.append(f"{INDENT}// functions")
    for i, function in enumerate(spec.abi.functions):
        if spec.include_annotations and i < len(spec.annotations.functionSelectors):
            lines.append(f"{INDENT}// Selector: {spec.annotations.functionSelectors[i].hex()}")
        lines.append(INDENT + _render_function(function))

    lines.append("")
    lines.append(f"{INDENT}// errors")
    for error in spec.abi.errors:
        arguments = ", ".join(_join(value.type, value.name) for value in error.inputs)
        lines.append(f"{INDENT}error {error.name}({arguments});")

    lines.append("}")
    return "\n".join(lines) + "\n"


def generate_interface(
    interface_name: str,
    abi: DecodedABI,
    *,
    license: str = "",
    pragma: str = "",
    annotations: Optional[Annotations] = None,
    include_annotations: bool = False,
) -> str:
    """Generates a Solidity interface for the given ABI.

    Args:
        interface_name: Name of the generated interface.
        abi: The decoded ABI. Compound parameters are resolved into structs.
        license: Optional SPDX license identifier for the header.
        pragma: Optional Solidity version constraint, e.g. "^0.8.17".
        annotations: Selector annotations, as returned by ``solface.abi.annotate``.
        include_annotations: Whether to render the annotations as comments.

    Returns:
        The Solidity source of the interface.

    Raises:
        InvalidParameterError: If ``interface_name`` is not a valid Solidity
            identifier.
    """
    if not SOLIDITY_IDENTIFIER.fullmatch(interface_name):
        raise InvalidParameterError(f"Invalid interface name: {interface_name!r}")

    resolved = resolve_compounds(abi)
    spec = InterfaceSpecification(
        name=interface_name,
        abi=resolved.enrichedABI,
        annotations=annotations or Annotations(),
        include_annotations=include_annotations,
        compound_types=resolved.compoundTypes,
        license=license,
        pragma=pragma,
    )
    logger.info(
        "interface.generated",
        interface=interface_name,
        structs=len(resolved.compoundTypes),
        events=len(abi.events),
        functions=len(abi.functions),
        errors=len(abi.errors),
    )
    return render(spec)

"""Decodes contract ABIs and computes selector annotations.

ABIs are decoded according to the Solidity Contract ABI specification:
https://docs.soliditylang.org/en/v0.8.17/abi-spec.html

Only events, functions and errors are kept. Constructors, fallback and
receive functions carry nothing an interface can declare, so they are
skipped along with any item of unknown type.
"""
from __future__ import annotations

import json
from typing import Any, List, Union

import structlog
from pydantic import ValidationError
from web3 import Web3

from solface.errors import DecodeError
from solface.types import Annotations, DecodedABI, ErrorItem, EventItem, FunctionItem, Value

logger = structlog.get_logger(__name__)

_ITEM_MODELS = {
    "event": EventItem,
    "function": FunctionItem,
    "error": ErrorItem,
}


def decode(raw: Union[str, bytes]) -> DecodedABI:
    """Decodes an ABI from its JSON representation.

    Args:
        raw: The JSON document, as text or UTF-8 bytes. It must be a JSON
            array of ABI items.

    Returns:
        A DecodedABI holding the events, functions and errors of the
        document, each list in declaration order.

    Raises:
        DecodeError: If the document is not valid JSON, is not an array, or
            contains an event/function/error item of the wrong shape.
    """
    try:
        items: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"ABI is not valid JSON: {e}") from e

    if not isinstance(items, list):
        raise DecodeError(f"ABI must be a JSON array, got {type(items).__name__}")

    decoded = DecodedABI()
    buckets = {
        "event": decoded.events,
        "function": decoded.functions,
        "error": decoded.errors,
    }
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise DecodeError(f"ABI item {i} must be a JSON object, got {type(item).__name__}")

        kind = item.get("type")
        model = _ITEM_MODELS.get(kind) if isinstance(kind, str) else None
        if model is None:
            continue

        try:
            buckets[kind].append(model.model_validate(item))
        except ValidationError as e:
            name = item.get("name", "")
            raise DecodeError(f"Could not decode {kind} {name!r} (item {i}): {e}") from e

    logger.debug(
        "abi.decoded",
        events=len(decoded.events),
        functions=len(decoded.functions),
        errors=len(decoded.errors),
    )
    return decoded


def canonical_type(value: Value) -> str:
    """Returns the type of a parameter as it appears in a canonical signature.

    Tuples are spelled out by their component types, keeping any array
    dimensions, so ``tuple[]`` with components (address, uint8) becomes
    ``(address,uint8)[]``.
    """
    if not value.type.startswith("tuple"):
        return value.type
    members = ",".join(canonical_type(component) for component in value.components)
    return f"({members}){value.type[len('tuple'):]}"


def method_selector(function: FunctionItem) -> bytes:
    """Calculates the 4-byte method selector for an ABI function.

    The selector is the first four bytes of the Keccak-256 hash of the
    canonical signature, e.g. ``transfer(address,uint256)``.
    """
    argument_types = ",".join(canonical_type(value) for value in function.inputs)
    signature = f"{function.name}({argument_types})"
    return bytes(Web3.keccak(text=signature))[:4]


def annotate(abi: DecodedABI) -> Annotations:
    """Generates selector annotations for a decoded ABI.

    Args:
        abi: The decoded ABI.

    Returns:
        Annotations with one selector per function and the ERC-165 interface
        ID, which is the XOR of every selector.
    """
    interface_id = bytearray(4)
    selectors: List[bytes] = []
    for function in abi.functions:
        selector = method_selector(function)
        selectors.append(selector)
        for i in range(4):
            interface_id[i] ^= selector[i]

    return Annotations(interfaceID=bytes(interface_id), functionSelectors=selectors)

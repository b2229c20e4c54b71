# tests/test_compounds.py

import pytest

from solface.compounds import (
    NamingPolicy,
    ResolutionContext,
    array_dimensions,
    compound_single_value,
    find_compound_types,
    is_flat,
    parse_internal_type,
    resolve_compounds,
)
from solface.types import (
    DecodedABI,
    ErrorItem,
    EventArgument,
    EventItem,
    FunctionItem,
    ItemValueIndex,
    Value,
)


def _tuple(name, components, type_="tuple", internal_type=""):
    return Value(name=name, type=type_, internalType=internal_type, components=components)


def _shallow():
    # tuple { uint256 rofl; address omg } lol
    return _tuple("lol", [
        Value(name="rofl", type="uint256"),
        Value(name="omg", type="address"),
    ])


def _deep():
    # tuple { uint256 rofl; tuple { address wtf; uint256 bbq } omg } lol
    return _tuple("lol", [
        Value(name="rofl", type="uint256"),
        _tuple("omg", [
            Value(name="wtf", type="address"),
            Value(name="bbq", type="uint256"),
        ]),
    ])


def _unnamed():
    return _tuple("", [Value(type="uint256"), Value(type="address")])


# --- Compound detection -----------------------------------------------------

def test_is_compound_type():
    assert _shallow().is_compound_type()
    assert not Value(name="x", type="uint256").is_compound_type()
    assert not Value(name="xs", type="uint256[]").is_compound_type()
    # Detection is structural, not by type name.
    assert not Value(name="t", type="tuple").is_compound_type()


# --- Naming helpers ---------------------------------------------------------

@pytest.mark.parametrize("internal_type, expected", [
    ("struct FacetCut", "FacetCut"),
    ("struct IDiamondCut.FacetCut", "FacetCut"),
    ("struct IDiamondCut.FacetCut[]", "FacetCut"),
    ("struct Lib.Point[3][]", "Point"),
    ("struct $Pair", "$Pair"),
    ("struct Lib.Caf\u00e9", "Compound"),
    ("struct Lib.Point\u0663", "Compound"),
    ("tuple", "Compound"),
    ("", "Compound"),
])
def test_parse_internal_type(internal_type, expected):
    assert parse_internal_type(internal_type) == expected


def test_context_counters_are_monotonic():
    context = ResolutionContext()
    assert context.next_type_name("") == "Compound_0"
    assert context.next_type_name("struct A.Point") == "Point_1"
    assert context.next_member_name() == "Attribute0"
    assert context.next_member_name() == "Attribute1"
    assert (context.type_counter, context.name_counter) == (2, 2)


@pytest.mark.parametrize("abi_type, expected", [
    ("tuple", ""),
    ("tuple[]", "[]"),
    ("tuple[2][]", "[2][]"),
    ("tuple()", ""),
])
def test_array_dimensions(abi_type, expected):
    assert array_dimensions(abi_type) == expected


# --- compound_single_value --------------------------------------------------

def test_scalar_is_returned_unchanged():
    value = Value(name="x", type="uint256")
    context = ResolutionContext()
    resolved, new_types = compound_single_value(value, context)
    assert resolved is value
    assert new_types == []
    assert (context.type_counter, context.name_counter) == (0, 0)


def test_single_level_tuple():
    context = ResolutionContext()
    resolved, new_types = compound_single_value(_shallow(), context)

    assert len(new_types) == 1
    compound = new_types[0]
    assert [m.name for m in compound.members] == ["rofl", "omg"]
    assert [m.value.type for m in compound.members] == ["uint256", "address"]
    assert resolved.name == "lol"
    assert resolved.type == compound.typeName
    assert not resolved.is_compound_type()


def test_nested_tuple_is_emitted_innermost_first():
    resolved, new_types = compound_single_value(_deep(), ResolutionContext())

    assert len(new_types) == 2
    inner, outer = new_types
    assert [m.name for m in inner.members] == ["wtf", "bbq"]
    assert [m.name for m in outer.members] == ["rofl", "omg"]
    assert outer.members[1].value.type == inner.typeName
    assert resolved.type == outer.typeName
    assert inner.typeName != outer.typeName


def test_siblings_are_emitted_in_declaration_order():
    value = _tuple("p", [
        _tuple("a", [Value(name="x", type="uint256")], internal_type="struct A"),
        _tuple("b", [Value(name="y", type="uint256")], internal_type="struct B"),
    ], internal_type="struct P")
    _, new_types = compound_single_value(value, ResolutionContext())
    assert [t.typeName for t in new_types] == ["A_0", "B_1", "P_2"]


def test_array_of_tuples_keeps_suffix():
    value = _tuple("cuts", [Value(name="x", type="uint256")], type_="tuple[]",
                   internal_type="struct IDiamondCut.FacetCut[]")
    resolved, new_types = compound_single_value(value, ResolutionContext())
    assert new_types[0].typeName == "FacetCut_0"
    assert resolved.type == "FacetCut_0[]"


def test_bare_tuple_has_no_suffix():
    resolved, new_types = compound_single_value(_shallow(), ResolutionContext())
    assert resolved.type == new_types[0].typeName
    assert not resolved.type.endswith("]")


def test_nested_array_member_keeps_suffix():
    value = _tuple("outer", [
        _tuple("points", [Value(name="x", type="int256")], type_="tuple[2]"),
    ])
    _, new_types = compound_single_value(value, ResolutionContext())
    inner, outer = new_types
    assert outer.members[0].value.type == f"{inner.typeName}[2]"


def test_tuple_without_components_is_left_alone():
    value = Value(name="e", type="tuple", components=[])
    context = ResolutionContext()
    resolved, new_types = compound_single_value(value, context)
    assert resolved is value
    assert new_types == []
    assert context.type_counter == 0


def test_placeholder_names_for_unnamed_members():
    context = ResolutionContext()
    _, new_types = compound_single_value(_unnamed(), context)
    names = [m.name for m in new_types[0].members]
    assert names == ["Attribute0", "Attribute1"]
    assert context.name_counter == 2


def test_placeholders_skip_sibling_names():
    value = _tuple("", [Value(type="uint256"), Value(name="Attribute0", type="address")])
    context = ResolutionContext()
    _, new_types = compound_single_value(value, context)
    names = [m.name for m in new_types[0].members]
    assert names == ["Attribute1", "Attribute0"]
    assert context.name_counter == 2


def test_leave_unnamed_suppresses_placeholders():
    context = ResolutionContext()
    _, new_types = compound_single_value(_unnamed(), context, NamingPolicy.LEAVE_UNNAMED)
    assert [m.name for m in new_types[0].members] == ["", ""]
    assert context.name_counter == 0


def test_counters_are_shared_across_calls():
    context = ResolutionContext()
    _, first = compound_single_value(_unnamed(), context)
    _, second = compound_single_value(_unnamed(), context)
    assert first[0].typeName != second[0].typeName
    assert {m.name for m in first[0].members}.isdisjoint({m.name for m in second[0].members})


def test_input_value_is_not_modified():
    value = _deep()
    before = value.model_copy(deep=True)
    compound_single_value(value, ResolutionContext())
    assert value == before


# --- resolve_compounds ------------------------------------------------------

def test_resolve_diamond_cut_facet(load_abi):
    abi = load_abi("DiamondCutFacet")

    before = find_compound_types(abi)
    assert before.event_inputs == [ItemValueIndex(0, 0)]
    assert before.function_inputs == [ItemValueIndex(0, 0)]
    assert before.function_outputs == []
    assert before.error_inputs == []

    resolved = resolve_compounds(abi)
    assert [t.typeName for t in resolved.compoundTypes] == ["FacetCut_0", "FacetCut_1"]
    assert resolved.enrichedABI.events[0].inputs[0].type == "FacetCut_0[]"
    assert resolved.enrichedABI.functions[0].inputs[0].type == "FacetCut_1[]"
    assert is_flat(resolved.enrichedABI)
    assert not any(find_compound_types(resolved.enrichedABI))
    assert resolved.originalABI == abi


def test_same_shape_in_event_and_function_is_not_deduplicated():
    abi = DecodedABI(
        events=[EventItem(name="E", inputs=[EventArgument(**_shallow().model_dump())])],
        functions=[FunctionItem(name="f", inputs=[_shallow()])],
    )
    resolved = resolve_compounds(abi)
    assert len(resolved.compoundTypes) == 2
    assert resolved.compoundTypes[0].typeName != resolved.compoundTypes[1].typeName
    assert is_flat(resolved.enrichedABI)


def test_traversal_order_events_functions_errors():
    def single(name, struct):
        return _tuple(name, [Value(name="x", type="uint256")], internal_type=f"struct {struct}")

    abi = DecodedABI(
        events=[EventItem(name="E", inputs=[EventArgument(**single("e", "Ev").model_dump())])],
        functions=[FunctionItem(name="f", inputs=[single("i", "In")], outputs=[single("", "Out")])],
        errors=[ErrorItem(name="Err", inputs=[single("r", "Er")])],
    )
    resolved = resolve_compounds(abi)
    assert [t.typeName for t in resolved.compoundTypes] == ["Ev_0", "In_1", "Out_2", "Er_3"]


def test_outputs_leave_members_unnamed_inputs_do_not():
    abi = DecodedABI(
        events=[EventItem(name="E", inputs=[EventArgument(**_unnamed().model_dump())])],
        functions=[FunctionItem(name="f", inputs=[_unnamed()], outputs=[_unnamed()])],
        errors=[ErrorItem(name="Err", inputs=[_unnamed()])],
    )
    event_type, input_type, output_type, error_type = resolve_compounds(abi).compoundTypes

    for compound in (event_type, input_type, error_type):
        assert all(m.name for m in compound.members)
    assert any(m.name == "" for m in output_type.members)


def test_event_metadata_is_preserved():
    argument = EventArgument(indexed=True, **_shallow().model_dump())
    abi = DecodedABI(events=[
        EventItem(name="E", anonymous=True, inputs=[argument, EventArgument(name="v", type="uint256")]),
    ])
    event = resolve_compounds(abi).enrichedABI.events[0]
    assert event.name == "E"
    assert event.anonymous is True
    assert all(isinstance(a, EventArgument) for a in event.inputs)
    assert [a.indexed for a in event.inputs] == [True, False]


def test_function_metadata_is_preserved():
    abi = DecodedABI(functions=[FunctionItem(name="f", stateMutability="view", inputs=[_deep()])])
    function = resolve_compounds(abi).enrichedABI.functions[0]
    assert function.name == "f"
    assert function.stateMutability == "view"
    assert function.type == "function"


def test_flattening_is_idempotent(load_abi):
    abi = load_abi("DiamondCutFacet")
    abi.errors.append(ErrorItem(name="Err", inputs=[_deep()]))
    abi.functions.append(FunctionItem(name="g", outputs=[_unnamed()]))

    first = resolve_compounds(abi)
    second = resolve_compounds(first.enrichedABI)
    assert second.compoundTypes == []
    assert second.enrichedABI == first.enrichedABI


def test_synthesized_names_are_unique(load_abi):
    abi = load_abi("DiamondCutFacet")
    abi.functions.append(FunctionItem(name="g", inputs=[_deep(), _deep()], outputs=[_deep()]))
    resolved = resolve_compounds(abi)
    names = [t.typeName for t in resolved.compoundTypes]
    assert len(names) == len(set(names)) == 8


def test_hints_ending_in_digits_do_not_collide():
    def single(struct):
        return _tuple("v", [Value(name="x", type="uint256")], internal_type=f"struct {struct}")

    hints = ["Vec", "Vec1"] + ["Filler"] * 9 + ["Vec"]
    abi = DecodedABI(functions=[FunctionItem(name="f", inputs=[single(h) for h in hints])])
    names = [t.typeName for t in resolve_compounds(abi).compoundTypes]
    assert names[1] == "Vec1_1"
    assert names[11] == "Vec_11"
    assert len(names) == len(set(names)) == 12


def test_explicit_context_continues_counting():
    context = ResolutionContext(type_counter=10)
    abi = DecodedABI(functions=[FunctionItem(name="f", inputs=[_shallow()])])
    resolved = resolve_compounds(abi, context)
    assert resolved.compoundTypes[0].typeName == "Compound_10"
    assert context.type_counter == 11

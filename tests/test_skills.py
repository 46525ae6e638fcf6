"""Unit tests for skill schemas and registry validation."""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from tests.helpers import run_tests
from agent_kit.errors import AgentKitError, DuplicateSkillName, MissingField, TypeMismatch, UnknownSkill
from agent_kit.skills import (
    FieldSpec,
    FieldType,
    SkillDefinition,
    SkillFailure,
    SkillRegistry,
    SkillSuccess,
    parse_input_schema,
)


async def _echo(**inputs):
    return inputs


def _registry():
    registry = SkillRegistry(owner = "test-agent")
    registry.register(
        SkillDefinition(
            name = "budget_calculator",
            description = "Price a trip",
            process = _echo,
            input_schema = parse_input_schema({
                "trip_details": {"type": "Text"},
                "duration": {"type": "Number"},
                "group_size": {"type": "Number", "optional": True},
                "interests": {"type": "Array", "optional": True},
                "context": {"type": "Object", "optional": True},
            }),
        )
    )
    return registry


def test_duplicate_name_rejected():
    """Registering a second skill with the same name must fail."""
    registry = _registry()
    try:
        registry.register(SkillDefinition(name = "budget_calculator", description = "again", process = _echo))
        assert False, "Expected DuplicateSkillName"
    except DuplicateSkillName as error:
        assert error.name == "budget_calculator"
    assert len(registry) == 1

    print("PASS: test_duplicate_name_rejected")
    return True


def test_missing_required_field_is_failure():
    """A missing required field comes back as a failure naming the field."""
    registry = _registry()
    result = asyncio.run(registry.invoke("budget_calculator", {"trip_details": "Rome"}))

    assert isinstance(result, SkillFailure), f"Expected failure, got {result}"
    assert result.ok is False
    assert "duration" in result.message
    assert result.to_payload() == {"error": result.message}

    try:
        registry.check("budget_calculator", {"trip_details": "Rome"})
        assert False, "check should raise MissingField"
    except MissingField as error:
        assert error.field == "duration"

    print("PASS: test_missing_required_field_is_failure")
    return True


def test_valid_inputs_succeed_and_extras_are_dropped():
    """Valid inputs succeed; unknown fields are ignored; absent optionals are None."""
    registry = _registry()
    result = asyncio.run(
        registry.invoke("budget_calculator", {"trip_details": "Rome", "duration": 4, "surprise": True})
    )

    assert isinstance(result, SkillSuccess), f"Expected success, got {result}"
    assert result.payload == {
        "trip_details": "Rome",
        "duration": 4,
        "group_size": None,
        "interests": None,
        "context": None,
    }

    print("PASS: test_valid_inputs_succeed_and_extras_are_dropped")
    return True


def test_type_mismatch_and_coercion():
    """Numbers accept numeric strings; non-numeric values and bools are rejected."""
    registry = _registry()

    coerced = registry.check("budget_calculator", {"trip_details": "Rome", "duration": " 7 ", "group_size": "2.5"})
    assert coerced["duration"] == 7
    assert coerced["group_size"] == 2.5

    for bad in ["seven", True, [7]]:
        try:
            registry.check("budget_calculator", {"trip_details": "Rome", "duration": bad})
            assert False, f"Expected TypeMismatch for {bad!r}"
        except TypeMismatch as error:
            assert error.field == "duration"
            assert error.expected == "Number"

    result = asyncio.run(registry.invoke("budget_calculator", {"trip_details": 42, "duration": 1}))
    assert isinstance(result, SkillFailure)
    assert "trip_details" in result.message

    print("PASS: test_type_mismatch_and_coercion")
    return True


def test_array_and_object_fields():
    """A bare string is wrapped for Array fields; Object requires a dict."""
    registry = _registry()
    checked = registry.check(
        "budget_calculator",
        {"trip_details": "Rome", "duration": 2, "interests": "food", "context": {"phase": "flights"}},
    )
    assert checked["interests"] == ["food"]
    assert checked["context"] == {"phase": "flights"}

    try:
        registry.check("budget_calculator", {"trip_details": "Rome", "duration": 2, "context": "flights"})
        assert False, "Expected TypeMismatch for Object"
    except TypeMismatch as error:
        assert error.expected == "Object"

    print("PASS: test_array_and_object_fields")
    return True


def test_unknown_skill_and_body_errors_are_failures():
    """Unknown skills and exceptions inside bodies never escape invoke."""
    registry = SkillRegistry(owner = "test-agent")

    async def explode(city):
        raise ValueError(f"no data for {city}")

    def error_dict(city):
        return {"error": "service down"}

    registry.register(SkillDefinition(
        name = "explode",
        description = "always fails",
        process = explode,
        input_schema = {"city": FieldSpec(FieldType.TEXT)},
    ))
    registry.register(SkillDefinition(
        name = "error_dict",
        description = "sync body reporting an error",
        process = error_dict,
        input_schema = {"city": FieldSpec(FieldType.TEXT)},
    ))

    missing = asyncio.run(registry.invoke("nope", {}))
    assert isinstance(missing, SkillFailure)
    assert "nope" in missing.message

    exploded = asyncio.run(registry.invoke("explode", {"city": "Oslo"}))
    assert isinstance(exploded, SkillFailure)
    assert "no data for Oslo" in exploded.message

    reported = asyncio.run(registry.invoke("error_dict", {"city": "Oslo"}))
    assert isinstance(reported, SkillFailure)
    assert reported.message == "service down"

    try:
        registry.get("nope")
        assert False, "Expected UnknownSkill"
    except UnknownSkill:
        pass

    print("PASS: test_unknown_skill_and_body_errors_are_failures")
    return True


def test_tool_spec_and_freeze():
    """Tool specs list required fields; a frozen registry rejects new skills."""
    registry = _registry()
    spec = registry.tool_specs()[0]["function"]

    assert spec["name"] == "budget_calculator"
    assert spec["parameters"]["required"] == ["trip_details", "duration"]
    assert spec["parameters"]["properties"]["duration"]["type"] == "number"
    assert spec["parameters"]["properties"]["interests"]["type"] == "array"

    registry.freeze()
    try:
        registry.register(SkillDefinition(name = "late", description = "", process = _echo))
        assert False, "Frozen registry should reject registration"
    except AgentKitError:
        pass

    try:
        parse_input_schema({"x": {"type": "Date"}})
        assert False, "Unsupported type should be rejected"
    except AgentKitError:
        pass

    print("PASS: test_tool_spec_and_freeze")
    return True


if __name__ == "__main__":
    sys.exit(0 if run_tests([
        test_duplicate_name_rejected,
        test_missing_required_field_is_failure,
        test_valid_inputs_succeed_and_extras_are_dropped,
        test_type_mismatch_and_coercion,
        test_array_and_object_fields,
        test_unknown_skill_and_body_errors_are_failures,
        test_tool_spec_and_freeze,
    ]) else 1)

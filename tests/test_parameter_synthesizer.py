"""
synthesize_parameters tests: defaulting rules and the setup fallback
"""

import json
from unittest.mock import patch

import pytest

from core.errors import ProviderError
from core.parameter_synthesizer import synthesize_parameters
from core.schemas import PARAMETER_SCHEMA, SelectParameter, SliderParameter, ToggleParameter


def provider_reply(parameters, priorities=("Speed", "Quality")):
    return json.dumps({"parameters": parameters, "suggestedPriorities": list(priorities)})


def synthesize_with(reply):
    with patch("core.parameter_synthesizer.call_llm", return_value=reply) as mock_llm:
        result = synthesize_parameters("Career", "Should I take the new job?")
    return result, mock_llm


def assert_fallback(result):
    assert [p.id for p in result.parameters] == ["cost", "risk"]
    assert all(isinstance(p, SliderParameter) for p in result.parameters)
    assert [p.value for p in result.parameters] == [50, 30]
    assert result.suggested_priorities == ["Cost Efficiency", "Reliability", "Speed", "Scalability"]


@pytest.mark.parametrize("error", [ProviderError("boom"), RuntimeError("network down"), ValueError("bad")])
def test_provider_failure_yields_fallback(error):
    with patch("core.parameter_synthesizer.call_llm", side_effect=error):
        first = synthesize_parameters("Finance", "Buy or rent?")
        second = synthesize_parameters("Finance", "Buy or rent?")
    assert_fallback(first)
    assert first == second


def test_unparseable_output_yields_fallback():
    result, _ = synthesize_with("I cannot help with that.")
    assert_fallback(result)


def test_empty_parameter_list_yields_fallback():
    result, _ = synthesize_with(provider_reply([]))
    assert_fallback(result)


def test_slider_without_default_uses_midpoint():
    result, _ = synthesize_with(provider_reply([
        {"id": "budget", "name": "budget", "label": "Budget", "type": "slider", "min": 0, "max": 100, "reason": "r"},
    ]))
    param = result.parameters[0]
    assert isinstance(param, SliderParameter)
    assert param.value == 50


def test_slider_missing_range_defaults_to_0_100():
    result, _ = synthesize_with(provider_reply([
        {"id": "focus", "name": "focus", "label": "Focus", "type": "slider", "reason": "r"},
    ]))
    param = result.parameters[0]
    assert (param.min, param.max, param.value) == (0, 100, 50)


def test_slider_explicit_default_is_cast_to_number():
    result, _ = synthesize_with(provider_reply([
        {"id": "salary", "name": "salary", "label": "Salary", "type": "slider",
         "min": 40000, "max": 200000, "unit": "USD", "defaultValue": "90000", "reason": "r"},
    ]))
    param = result.parameters[0]
    assert param.value == 90000
    assert param.unit == "USD"


def test_toggle_ignores_provider_default():
    result, _ = synthesize_with(provider_reply([
        {"id": "relocate", "name": "relocate", "label": "Relocation", "type": "toggle",
         "defaultValue": "true", "reason": "r"},
    ]))
    param = result.parameters[0]
    assert isinstance(param, ToggleParameter)
    assert param.value is False


def test_select_explicit_default():
    result, _ = synthesize_with(provider_reply([
        {"id": "mode", "name": "mode", "label": "Mode", "type": "select",
         "options": ["X", "Y"], "defaultValue": "X", "reason": "r"},
    ]))
    param = result.parameters[0]
    assert isinstance(param, SelectParameter)
    assert param.value == "X"


def test_unknown_kind_becomes_free_text_select():
    result, _ = synthesize_with(provider_reply([
        {"id": "notes", "name": "notes", "label": "Notes", "type": "text", "reason": "r"},
    ]))
    param = result.parameters[0]
    assert isinstance(param, SelectParameter)
    assert param.value == ""


def test_entries_without_id_are_dropped():
    result, _ = synthesize_with(provider_reply([
        {"name": "orphan", "type": "slider"},
        "garbage",
        {"id": "keep", "name": "keep", "label": "Keep", "type": "toggle", "reason": "r"},
    ]))
    assert [p.id for p in result.parameters] == ["keep"]


def test_fenced_reply_and_priorities():
    reply = "```json\n" + provider_reply(
        [{"id": "a", "name": "a", "label": "A", "type": "slider", "reason": "r"}],
        priorities=["Growth", "Stability"],
    ) + "\n```"
    result, mock_llm = synthesize_with(reply)
    assert result.suggested_priorities == ["Growth", "Stability"]

    kwargs = mock_llm.call_args.kwargs
    assert kwargs["schema"] is PARAMETER_SCHEMA
    prompt = mock_llm.call_args.args[0][-1]["content"]
    assert "Category: Career" in prompt
    assert "Should I take the new job?" in prompt


@pytest.mark.parametrize("field, raw_value", [("defaultValue", "nan"), ("defaultValue", "inf"), ("min", "nan"), ("max", "-inf")])
def test_non_finite_slider_numbers_are_treated_as_missing(field, raw_value):
    entry = {"id": "a", "name": "a", "label": "A", "type": "slider", "min": 0, "max": 100, "reason": "r"}
    entry[field] = raw_value
    result, _ = synthesize_with(provider_reply([entry]))
    param = result.parameters[0]
    assert param.id == "a"
    assert (param.min, param.max, param.value) == (0, 100, 50)


def test_numeric_unit_is_coerced_to_string():
    result, _ = synthesize_with(provider_reply([
        {"id": "a", "name": "a", "label": "A", "type": "slider", "reason": "r"},
        {"id": "b", "name": "b", "label": "B", "type": "slider", "unit": 5, "reason": "r"},
    ]))
    assert [p.id for p in result.parameters] == ["a", "b"]
    assert result.parameters[1].unit == "5"


def test_invalid_entry_is_dropped_without_losing_siblings():
    result, _ = synthesize_with(provider_reply([
        {"id": "a", "name": "a", "label": "A", "type": "slider", "reason": "r"},
        {"id": "huge", "name": "huge", "label": "Huge", "type": "slider",
         "min": 1e308, "max": 1.7e308, "reason": "r"},
    ]))
    assert [p.id for p in result.parameters] == ["a"]


def test_string_options_are_ignored():
    result, _ = synthesize_with(provider_reply([
        {"id": "mode", "name": "mode", "label": "Mode", "type": "select",
         "options": "abc", "defaultValue": "Fast", "reason": "r"},
    ]))
    param = result.parameters[0]
    assert param.options == []
    assert param.value == "Fast"

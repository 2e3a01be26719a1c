import logging
import math

from pydantic import ValidationError

from core.extractor import extract_json
from core.llm_client import SETUP_MODEL, build_messages, call_llm
from core.schemas import (
    PARAMETER_SCHEMA,
    ParameterSetup,
    SelectParameter,
    SliderParameter,
    ToggleParameter,
)

logger = logging.getLogger(__name__)

SYSTEM_SETUP = "You are The Referee. Provide strictly valid JSON following the schema. Be precise and objective."

SETUP_PROMPT = """
Analyze this decision intent:
Category: {category}
Problem: "{problem}"

Identify 4-6 key parameters. Use standard numeric ranges (e.g., 0-100 or specific units like USD where relevant).
Available types: 'slider', 'toggle', 'select'.
Also suggest a few priorities the user may want to weigh.
"""

FALLBACK_PRIORITIES = ["Cost Efficiency", "Reliability", "Speed", "Scalability"]


def fallback_setup():
    return ParameterSetup(
        parameters=[
            SliderParameter(id="cost", name="cost", label="Importance of Cost", min=0, max=100,
                            value=50, reason="Budget is often a key factor."),
            SliderParameter(id="risk", name="risk", label="Risk Tolerance", min=0, max=100,
                            value=30, reason="Helps balance safety vs innovation."),
        ],
        suggested_priorities=list(FALLBACK_PRIORITIES),
    )


def _number(value, default):
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def build_parameter(raw):
    """Turn one raw provider entry into a typed parameter, or None if unusable."""
    if not isinstance(raw, dict) or not raw.get("id"):
        return None

    param_id = str(raw["id"])
    common = {
        "id": param_id,
        "name": str(raw.get("name") or param_id),
        "label": str(raw.get("label") or raw.get("name") or param_id),
        "unit": str(raw["unit"]) if raw.get("unit") not in (None, "") else None,
        "reason": str(raw.get("reason") or ""),
    }
    kind = str(raw.get("type") or raw.get("kind") or "").lower()

    try:
        return _typed_parameter(kind, raw, common)
    except ValidationError as e:
        logger.warning("Dropping parameter %s: %s", param_id, e)
        return None


def _typed_parameter(kind, raw, common):
    default = raw.get("defaultValue")
    if kind == "slider":
        low = _number(raw.get("min"), 0.0)
        high = _number(raw.get("max"), 100.0)
        value = _number(default, (low + high) / 2)
        return SliderParameter(min=low, max=high, value=value, **common)
    if kind == "toggle":
        # provider defaults for toggles are ignored on purpose
        return ToggleParameter(value=False, **common)

    options = raw.get("options")
    options = [str(o) for o in options if o is not None] if isinstance(options, list) else []
    value = "" if default is None else str(default)
    return SelectParameter(options=options, value=value, **common)


def synthesize_parameters(category, problem_statement):
    """
    Ask the model for the tunable parameters of a dilemma.

    Never fails: any problem along the way yields the fixed fallback setup.
    """
    prompt = SETUP_PROMPT.format(category=category, problem=problem_statement)
    try:
        raw = call_llm(
            build_messages(prompt, system=SYSTEM_SETUP),
            model=SETUP_MODEL,
            schema=PARAMETER_SCHEMA,
            schema_name="decision_parameters",
        )
        data = extract_json(raw)
        if not isinstance(data, dict):
            raise ValueError("parameter payload is not an object")

        parameters = [p for p in map(build_parameter, data.get("parameters") or []) if p is not None]
        if not parameters:
            raise ValueError("no usable parameters in provider output")

        priorities = [str(p) for p in data.get("suggestedPriorities") or [] if p]
        return ParameterSetup(parameters=parameters, suggested_priorities=priorities)
    except Exception as e:
        logger.warning("Setup analysis failed, using fallback parameters: %s", e)
        return fallback_setup()

import logging

from core.extractor import extract_json
from core.llm_client import COMPARE_MODEL, build_messages, call_llm
from core.schemas import (
    COMPARISON_SCHEMA,
    ComparisonOption,
    ComparisonResponse,
    OptionScores,
    SliderParameter,
    ToggleParameter,
)

logger = logging.getLogger(__name__)

SYSTEM_COMPARE = "You are The Referee, a neutral decision analyst. Return strictly valid JSON."

COMPARE_PROMPT = """
Dilemma: "{problem}"
Category: "{category}"
Constraints:
{constraints}
Priorities: {priorities}

Identify and score 2-3 distinct, viable options. Provide a clear recommendation.
"""

DEFAULT_NAME = "Option"
DEFAULT_OVERVIEW = "Path analyzed based on your requirements."
DEFAULT_SUMMARY = "The Referee has analyzed your options."
DEFAULT_RECOMMENDATION = "Consider the trade-offs above to make your choice."


def format_value(param):
    if isinstance(param, ToggleParameter):
        return "Yes" if param.value else "No"
    if isinstance(param, SliderParameter) and float(param.value).is_integer():
        return str(int(param.value))
    return str(param.value)


def format_constraints(params):
    return "\n".join(f"- {p.label}: {format_value(p)} {p.unit or ''}".rstrip() for p in params)


def build_prompt(prefs):
    return COMPARE_PROMPT.format(
        problem=prefs.problem_statement,
        category=prefs.category,
        constraints=format_constraints(prefs.dynamic_params),
        priorities=", ".join(prefs.priorities),
    )


def _strings(value):
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def normalize_option(raw):
    if not isinstance(raw, dict):
        raw = {}
    scores = raw.get("scores")
    return ComparisonOption(
        name=str(raw.get("name") or DEFAULT_NAME),
        overview=str(raw.get("overview") or DEFAULT_OVERVIEW),
        pros=_strings(raw.get("pros")),
        cons=_strings(raw.get("cons")),
        best_for=str(raw.get("best_for") or ""),
        risks=_strings(raw.get("risks")),
        cost_level=str(raw.get("cost_level") or ""),
        complexity=str(raw.get("complexity") or ""),
        scores=OptionScores(**scores) if isinstance(scores, dict) else OptionScores(),
    )


def normalize_comparison(data):
    if not isinstance(data, dict):
        data = {}
    options = data.get("options")
    return ComparisonResponse(
        options=[normalize_option(o) for o in options] if isinstance(options, list) else [],
        summary=str(data.get("summary") or DEFAULT_SUMMARY),
        recommendation=str(data.get("recommendation") or DEFAULT_RECOMMENDATION),
    )


def compare_options(prefs):
    """
    Run a comparison for the given preferences.

    Provider failures are logged and re-raised; there is no fallback result.
    """
    try:
        raw = call_llm(
            build_messages(build_prompt(prefs), system=SYSTEM_COMPARE),
            model=COMPARE_MODEL,
            schema=COMPARISON_SCHEMA,
            schema_name="comparison",
            max_tokens=4000,
        )
    except Exception:
        logger.exception("Comparison analysis failed")
        raise

    return normalize_comparison(extract_json(raw))

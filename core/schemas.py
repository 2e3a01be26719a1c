import math
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DECISION_CATEGORIES = [
    "Career",
    "Business Strategy",
    "Technology",
    "Finance",
    "Personal",
    "Education",
    "Other",
]

SCORE_FIELDS = ("suitability", "risk", "cost", "scalability")
DEFAULT_SCORE = 50


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class _BaseParameter(_Frozen):
    id: str
    name: str
    label: str
    unit: Optional[str] = None
    reason: str = ""


class SliderParameter(_BaseParameter):
    kind: Literal["slider"] = "slider"
    min: float = Field(0, allow_inf_nan=False)
    max: float = Field(100, allow_inf_nan=False)
    value: float = Field(allow_inf_nan=False)

    @property
    def is_fixed(self):
        return self.min == self.max

    @model_validator(mode="after")
    def _keep_value_in_range(self):
        low, high = sorted((self.min, self.max))
        value = min(max(self.value, low), high)
        # frozen model, so write through __dict__ during validation
        self.__dict__.update(min=low, max=high, value=value)
        return self


class ToggleParameter(_BaseParameter):
    kind: Literal["toggle"] = "toggle"
    value: bool = False


class SelectParameter(_BaseParameter):
    kind: Literal["select"] = "select"
    options: List[str] = Field(default_factory=list)
    value: str = ""

    @model_validator(mode="after")
    def _keep_value_in_options(self):
        if self.options and self.value not in self.options:
            self.__dict__["value"] = self.options[0]
        return self


DynamicParameter = Annotated[
    Union[SliderParameter, ToggleParameter, SelectParameter],
    Field(discriminator="kind"),
]


class ParameterSetup(_Frozen):
    parameters: List[DynamicParameter]
    suggested_priorities: List[str] = Field(default_factory=list)


class UserPreferences(_Frozen):
    problem_statement: str
    category: str
    dynamic_params: List[DynamicParameter] = Field(default_factory=list)
    priorities: List[str] = Field(default_factory=list)


class OptionScores(_Frozen):
    suitability: int = DEFAULT_SCORE
    risk: int = DEFAULT_SCORE
    cost: int = DEFAULT_SCORE
    scalability: int = DEFAULT_SCORE

    @field_validator(*SCORE_FIELDS, mode="before")
    @classmethod
    def _clamp(cls, v):
        if v is None:
            return DEFAULT_SCORE
        try:
            v = float(v)
        except (TypeError, ValueError):
            return DEFAULT_SCORE
        if not math.isfinite(v):
            return DEFAULT_SCORE
        v = round(v)
        return min(max(v, 0), 100)


class ComparisonOption(_Frozen):
    name: str
    overview: str
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    best_for: str = ""
    risks: List[str] = Field(default_factory=list)
    cost_level: str = ""
    complexity: str = ""
    scores: OptionScores = Field(default_factory=OptionScores)


class ComparisonResponse(_Frozen):
    options: List[ComparisonOption] = Field(default_factory=list)
    summary: str
    recommendation: str


# JSON schemas sent to the provider alongside each prompt

PARAMETER_SCHEMA = {
    "type": "object",
    "properties": {
        "parameters": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": "string"},
                    "label": {"type": "string"},
                    "type": {"type": "string"},
                    "min": {"type": "number"},
                    "max": {"type": "number"},
                    "unit": {"type": "string"},
                    "options": {"type": "array", "items": {"type": "string"}},
                    "reason": {"type": "string"},
                    "defaultValue": {"type": "string"},
                },
                "required": ["id", "name", "label", "type", "reason"],
            },
        },
        "suggestedPriorities": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["parameters", "suggestedPriorities"],
}

COMPARISON_SCHEMA = {
    "type": "object",
    "properties": {
        "options": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "overview": {"type": "string"},
                    "pros": {"type": "array", "items": {"type": "string"}},
                    "cons": {"type": "array", "items": {"type": "string"}},
                    "best_for": {"type": "string"},
                    "risks": {"type": "array", "items": {"type": "string"}},
                    "cost_level": {"type": "string"},
                    "complexity": {"type": "string"},
                    "scores": {
                        "type": "object",
                        "properties": {name: {"type": "integer"} for name in SCORE_FIELDS},
                        "required": list(SCORE_FIELDS),
                    },
                },
                "required": [
                    "name", "overview", "pros", "cons", "best_for",
                    "risks", "cost_level", "complexity", "scores",
                ],
            },
        },
        "summary": {"type": "string"},
        "recommendation": {"type": "string"},
    },
    "required": ["options", "summary", "recommendation"],
}

"""
pytest shared fixtures
"""

import os
import sys

import pytest

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from core.schemas import SelectParameter, SliderParameter, ToggleParameter, UserPreferences  # noqa: E402


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Test environment variables"""
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-openrouter-key")


@pytest.fixture
def sample_params():
    return [
        SliderParameter(id="budget", name="budget", label="Budget", min=0, max=10000,
                        unit="USD", value=5000, reason="Money matters."),
        ToggleParameter(id="remote", name="remote", label="Remote only", reason="Team is distributed."),
        SelectParameter(id="horizon", name="horizon", label="Time horizon",
                        options=["Short", "Medium", "Long"], value="Medium", reason="Planning window."),
    ]


@pytest.fixture
def sample_preferences(sample_params):
    return UserPreferences(
        problem_statement="Should we rebuild our billing system?",
        category="Technology",
        dynamic_params=sample_params,
        priorities=["Reliability", "Cost Efficiency"],
    )

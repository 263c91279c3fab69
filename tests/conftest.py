"""
Pytest fixtures and configuration for panelscore test suite.
"""

import os
from pathlib import Path

import pytest

from panelscore.config import PanelConfig, reset_panel_config
from panelscore.history import HistoryLedger, reset_history_ledger
from panelscore.raters import RaterOutput, TokenUsage
from panelscore.weights import WeightRegistry, reset_weight_registry


@pytest.fixture(autouse=True)
def clean_globals(monkeypatch):
    """Start every test from default configuration and fresh globals."""
    for key in list(os.environ):
        if key.startswith("PANELSCORE_"):
            monkeypatch.delenv(key, raising=False)
    
    reset_panel_config()
    reset_weight_registry()
    reset_history_ledger()
    yield
    reset_panel_config()
    reset_weight_registry()
    reset_history_ledger()


@pytest.fixture
def registry() -> WeightRegistry:
    """Registry with the default expertise table."""
    return WeightRegistry()


@pytest.fixture
def two_rater_registry() -> WeightRegistry:
    """Two raters, two dimensions, weights summing to 1.0 per dimension."""
    return WeightRegistry(
        weights={
            "rater-a": {"code_quality": 0.6, "code_complexity": 0.4},
            "rater-b": {"code_quality": 0.4, "code_complexity": 0.6},
        },
        display_names={},
        aliases={},
        dimensions=["code_quality", "code_complexity"],
    )


@pytest.fixture
def history_dir(tmp_path) -> Path:
    """Temporary directory for history documents."""
    return tmp_path / "evaluated"


@pytest.fixture
def ledger(history_dir) -> HistoryLedger:
    """Ledger writing into a temporary directory."""
    return HistoryLedger(base_dir=str(history_dir), config=PanelConfig())


@pytest.fixture
def make_output():
    """Factory for RaterOutputs."""
    def _make(rater, round=None, tokens=None, **values):
        token_usage = TokenUsage(*tokens) if tokens else None
        return RaterOutput(rater=rater, values=values, round=round, token_usage=token_usage)
    return _make

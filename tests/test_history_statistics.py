"""
Tests for history statistics.

Tests:
- Default filling of entries written before a dimension existed
- Per-dimension statistics
- Trend direction and polarity-aware improvement
- Convergence and token cost across evaluations
"""

import pytest

from panelscore.history import (
    HistoryEntry,
    TokenSnapshot,
    compute_history_statistics,
    convergence_statistics,
    fill_missing_dimensions,
    token_statistics,
    trend_direction,
)


def _entry(number, **metrics):
    return HistoryEntry(
        timestamp=f"2025-01-0{number}T00:00:00+00:00",
        source="test",
        evaluation_number=number,
        metrics=metrics,
    )


class TestFillMissing:
    """Tests for fill_missing_dimensions."""
    
    def test_missing_filled_with_zero(self):
        """Test that absent keys get 0.0."""
        filled = fill_missing_dimensions({"code_quality": 7.0}, ["code_quality", "debt_reduction_hours"])
        
        assert filled == {"code_quality": 7.0, "debt_reduction_hours": 0.0}
    
    def test_null_kept(self):
        """Test that a stored abstention is not zero-filled."""
        filled = fill_missing_dimensions({"debt_reduction_hours": None}, ["debt_reduction_hours"])
        
        assert filled["debt_reduction_hours"] is None
    
    def test_input_not_modified(self):
        """Test that the input mapping is left alone."""
        metrics = {"code_quality": 7.0}
        
        fill_missing_dimensions(metrics, ["test_coverage"])
        
        assert metrics == {"code_quality": 7.0}


class TestStatistics:
    """Tests for compute_history_statistics."""
    
    def test_basic_statistics(self):
        """Test average, median, spread and trend."""
        entries = [_entry(1, code_quality=6.0), _entry(2, code_quality=7.0), _entry(3, code_quality=8.0)]
        
        stats = compute_history_statistics(entries, dimensions=["code_quality"])["code_quality"]
        
        assert stats.average == pytest.approx(7.0)
        assert stats.median == pytest.approx(7.0)
        assert stats.std_dev == pytest.approx((2 / 3) ** 0.5)
        assert stats.minimum == 6.0
        assert stats.maximum == 8.0
        assert stats.range == 2.0
        assert stats.trend == 2.0
        assert stats.count == 3
    
    def test_empty_history(self):
        """Test that no entries give no statistics."""
        assert compute_history_statistics([]) == {}
    
    def test_old_entries_default_to_zero(self):
        """Test that entries predating a dimension count as 0."""
        entries = [_entry(1, code_quality=7.0), _entry(2, code_quality=7.0, debt_reduction_hours=4.0)]
        
        stats = compute_history_statistics(entries, dimensions=["debt_reduction_hours"])
        
        assert stats["debt_reduction_hours"].values == [0.0, 4.0]
        assert stats["debt_reduction_hours"].average == 2.0
    
    def test_nulls_excluded(self):
        """Test that abstentions are left out of the statistics."""
        entries = [_entry(1, test_coverage=None), _entry(2, test_coverage=6.0)]
        
        stats = compute_history_statistics(entries, dimensions=["test_coverage"])["test_coverage"]
        
        assert stats.values == [6.0]
        assert stats.trend == 0.0
    
    def test_all_null(self):
        """Test a dimension that was never scored."""
        entries = [_entry(1, test_coverage=None)]
        
        stats = compute_history_statistics(entries, dimensions=["test_coverage"])["test_coverage"]
        
        assert stats.count == 0
        assert stats.average is None
        assert stats.direction == "stable"
    
    def test_covers_catalogue_by_default(self):
        """Test that every catalogue dimension is summarized."""
        stats = compute_history_statistics([_entry(1, code_quality=7.0)])
        
        assert len(stats) == 8


class TestTrend:
    """Tests for trend direction and improvement."""
    
    def test_direction_threshold(self):
        """Test that moves within the threshold are stable."""
        assert trend_direction(0.05, 0.1) == "stable"
        assert trend_direction(0.5, 0.1) == "increasing"
        assert trend_direction(-0.5, 0.1) == "decreasing"
    
    def test_quality_increase_is_improving(self):
        """Test a higher-is-better dimension going up."""
        entries = [_entry(1, code_quality=6.0), _entry(2, code_quality=7.5)]
        
        stats = compute_history_statistics(entries, dimensions=["code_quality"])["code_quality"]
        
        assert stats.direction == "increasing"
        assert stats.improving is True
    
    def test_complexity_increase_is_not_improving(self):
        """Test a lower-is-better dimension going up."""
        entries = [_entry(1, code_complexity=3.0), _entry(2, code_complexity=5.0)]
        
        stats = compute_history_statistics(entries, dimensions=["code_complexity"])["code_complexity"]
        
        assert stats.direction == "increasing"
        assert stats.improving is False
    
    def test_neutral_dimension(self):
        """Test that estimates have no favourable direction."""
        entries = [_entry(1, ideal_time_hours=2.0), _entry(2, ideal_time_hours=4.0)]
        
        stats = compute_history_statistics(entries, dimensions=["ideal_time_hours"])["ideal_time_hours"]
        
        assert stats.improving is None
    
    def test_configured_threshold(self, monkeypatch):
        """Test that PANELSCORE_TREND_THRESHOLD widens the stable band."""
        monkeypatch.setenv("PANELSCORE_TREND_THRESHOLD", "1.0")
        from panelscore.config import reset_panel_config
        reset_panel_config()
        
        entries = [_entry(1, code_quality=6.0), _entry(2, code_quality=6.5)]
        
        stats = compute_history_statistics(entries, dimensions=["code_quality"])["code_quality"]
        
        assert stats.direction == "stable"


def _scored_entry(number, convergence, input_tokens, output_tokens, cost):
    return HistoryEntry(
        timestamp=f"2025-01-0{number}T00:00:00+00:00",
        source="test",
        evaluation_number=number,
        tokens=TokenSnapshot(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
            total_cost=cost,
        ),
        convergence_score=convergence,
    )


class TestConvergenceStatistics:
    """Tests for convergence_statistics."""
    
    def test_average_min_max_trend(self):
        """Test convergence statistics across evaluations."""
        entries = [
            _scored_entry(1, 0.5, 1000, 100, 0.0045),
            _scored_entry(2, 0.75, 1000, 100, 0.0045),
            _scored_entry(3, 1.0, 1000, 100, 0.0045),
        ]
        
        stats = convergence_statistics(entries)
        
        assert stats.average == pytest.approx(0.75)
        assert stats.minimum == 0.5
        assert stats.maximum == 1.0
        assert stats.trend == 0.5
        assert stats.direction == "increasing"
        assert stats.improving is True
    
    def test_empty_history(self):
        """Test that no entries give empty statistics."""
        stats = convergence_statistics([])
        
        assert stats.count == 0
        assert stats.average is None


class TestTokenStatistics:
    """Tests for token_statistics."""
    
    def test_totals(self):
        """Test token and cost totals across evaluations."""
        entries = [
            _scored_entry(1, 0.8, 1000, 200, 0.006),
            _scored_entry(2, 0.9, 3000, 400, 0.015),
        ]
        
        stats = token_statistics(entries)
        
        assert stats.evaluations == 2
        assert stats.input_tokens == 4000
        assert stats.output_tokens == 600
        assert stats.total_tokens == 4600
        assert stats.total_cost == 0.021
        assert stats.cost.average == pytest.approx(0.0105)
        assert stats.to_dict()["cost"]["max"] == 0.015
    
    def test_cheaper_is_improving(self):
        """Test that falling cost counts as an improvement."""
        entries = [
            _scored_entry(1, 0.8, 1000, 200, 0.5),
            _scored_entry(2, 0.8, 100, 20, 0.05),
        ]
        
        stats = token_statistics(entries, trend_threshold=0.1)
        
        assert stats.cost.direction == "decreasing"
        assert stats.cost.improving is True
    
    def test_empty_history(self):
        """Test that no entries give zero totals."""
        stats = token_statistics([])
        
        assert stats.total_tokens == 0
        assert stats.total_cost == 0.0
        assert stats.cost.count == 0

"""
Tests for the Derived Metric Composer.

Tests:
- Net values and their null policy
- Commit score formula and clamping
- Composition from consensus values
"""

import pytest

from panelscore.consensus import (
    COMMIT_SCORE,
    NET_DEBT_HOURS,
    DerivedMetricComposer,
    NetMetric,
    commit_score,
    net_value,
)


class TestNetValue:
    """Tests for net_value."""
    
    def test_difference(self):
        """Test positive minus negative."""
        assert net_value(6.0, 2.5) == 3.5
    
    def test_null_operand_is_zero(self):
        """Test that a null operand counts as 0."""
        assert net_value(6.0, None) == 6.0
        assert net_value(None, 2.0) == -2.0
    
    def test_never_null(self):
        """Test that two nulls give 0, not None."""
        assert net_value(None, None) == 0.0


class TestCommitScore:
    """Tests for commit_score."""
    
    def test_exact_estimate(self):
        """Test a change that took exactly the ideal time."""
        # estimation 10, time_factor 1/5, penalties below 1
        score = commit_score(quality=8.0, complexity=4.0, actual_hours=2.0, ideal_hours=2.0)
        
        quality_penalty = (0.2 ** 2) * (1 / 5) * 4
        complexity_penalty = (0.4 ** 2) * (1 / 5) * 4
        expected = 8 * 0.4 - 4 * 0.3 + 10 * 0.3 + 3 - max(quality_penalty, complexity_penalty)
        assert score == pytest.approx(expected)
    
    def test_zero_ideal_hours(self):
        """Test the neutral estimation score when no ideal time is known."""
        score = commit_score(quality=5.0, complexity=5.0, actual_hours=100.0, ideal_hours=0.0)
        
        assert score == pytest.approx(5 * 0.4 - 5 * 0.3 + 5 * 0.3 + 3, abs=0.01)
    
    def test_clamped_low(self):
        """Test that the score never drops below 1."""
        assert commit_score(quality=1.0, complexity=10.0, actual_hours=0.0, ideal_hours=10.0) == 1.0
    
    def test_clamped_high(self):
        """Test that the score never exceeds 10."""
        assert commit_score(quality=10.0, complexity=0.0, actual_hours=100.0, ideal_hours=100.0) <= 10.0
    
    def test_null_input(self):
        """Test that any null input gives None."""
        assert commit_score(None, 4.0, 2.0, 2.0) is None
        assert commit_score(8.0, 4.0, 2.0, None) is None


class TestComposer:
    """Tests for DerivedMetricComposer."""
    
    def test_default_metrics(self):
        """Test net debt and commit score from consensus values."""
        derived = DerivedMetricComposer().compose({
            "code_quality": 8.0,
            "code_complexity": 4.0,
            "actual_time_hours": 2.0,
            "ideal_time_hours": 2.0,
            "technical_debt_hours": 6.0,
            "debt_reduction_hours": 1.5,
        })
        
        assert derived[NET_DEBT_HOURS] == 4.5
        assert derived[COMMIT_SCORE] is not None
    
    def test_missing_operand(self):
        """Test composition with all-abstain dimensions."""
        derived = DerivedMetricComposer().compose({"technical_debt_hours": 6.0})
        
        assert derived[NET_DEBT_HOURS] == 6.0
        assert derived[COMMIT_SCORE] is None
    
    def test_custom_net_metric(self):
        """Test a user-defined net pair."""
        composer = DerivedMetricComposer(
            net_metrics=[NetMetric("net_time", "actual_time_hours", "ideal_time_hours")]
        )
        
        derived = composer.compose({"actual_time_hours": 5.0, "ideal_time_hours": 3.0})
        
        assert derived["net_time"] == 2.0
        assert NET_DEBT_HOURS not in derived

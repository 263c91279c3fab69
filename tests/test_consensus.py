"""
Tests for the Weighted Consensus Calculator.

Tests:
- Weighted average over two raters
- Abstentions and the all-abstain null result
- Single contributor and boundedness
- Zero-weight and fallback-weight handling
"""

import logging
import math

import pytest

from panelscore.consensus import WeightedConsensusCalculator
from panelscore.weights import WeightRegistry


@pytest.fixture
def calculator(two_rater_registry):
    """Calculator over the two-rater registry."""
    return WeightedConsensusCalculator(two_rater_registry)


class TestWeightedAverage:
    """Tests for the weighted average."""
    
    def test_two_raters_quality(self, calculator):
        """Test quality consensus 8*0.6 + 6*0.4 = 7.2."""
        entry = calculator.calculate("code_quality", [("rater-a", 8.0), ("rater-b", 6.0)])
        
        assert entry.value == pytest.approx(7.2)
        assert entry.presented_value == 7.2
    
    def test_two_raters_complexity(self, calculator):
        """Test complexity consensus 3*0.4 + 5*0.6 = 4.2."""
        entry = calculator.calculate("code_complexity", [("rater-a", 3.0), ("rater-b", 5.0)])
        
        assert entry.value == pytest.approx(4.2)
    
    def test_calculate_many(self, calculator):
        """Test several dimensions at once."""
        entries = calculator.calculate_many(
            {
                "rater-a": {"code_quality": 8.0, "code_complexity": 3.0},
                "rater-b": {"code_quality": 6.0, "code_complexity": 5.0},
            },
            ["code_quality", "code_complexity"],
            round_number=1,
        )
        
        assert entries["code_quality"].value == pytest.approx(7.2)
        assert entries["code_complexity"].value == pytest.approx(4.2)
        assert entries["code_quality"].round == 1
    
    def test_weights_carried_on_contributors(self, calculator):
        """Test that each contributor records its effective weight."""
        entry = calculator.calculate("code_quality", [("rater-a", 8.0), ("rater-b", 6.0)])
        
        weights = {c.rater: c.weight.value for c in entry.contributors}
        assert weights == {"rater-a": 0.6, "rater-b": 0.4}
        assert entry.total_weight == pytest.approx(1.0)
    
    def test_bounded_by_contributed_values(self, registry):
        """Test that consensus stays within the contributed range."""
        calculator = WeightedConsensusCalculator(registry)
        pairs = [
            ("business-analyst", 3.3),
            ("sdet", 9.1),
            ("developer-author", 5.7),
            ("senior-architect", 7.9),
            ("developer-reviewer", 4.4),
        ]
        
        for dimension in registry.dimensions:
            value = calculator.calculate(dimension, pairs).value
            assert 3.3 <= value <= 9.1
    
    def test_no_rounding_before_presentation(self, calculator):
        """Test that the raw value keeps full precision."""
        entry = calculator.calculate("code_quality", [("rater-a", 7.33), ("rater-b", 7.11)])
        
        assert entry.value == pytest.approx(7.33 * 0.6 + 7.11 * 0.4)
        assert entry.presented_value == 7.2


class TestAbstentions:
    """Tests for abstaining raters."""
    
    def test_abstainer_excluded(self, calculator):
        """Test that the remaining rater's value is used exactly."""
        entry = calculator.calculate("code_quality", [("rater-a", 8.0), ("rater-b", None)])
        
        assert entry.value == 8.0
        assert entry.abstained == ("rater-b",)
        assert [c.rater for c in entry.contributors] == ["rater-a"]
    
    def test_all_abstain_is_null(self, calculator, caplog):
        """Test that all abstentions give None, never zero."""
        with caplog.at_level(logging.WARNING):
            entry = calculator.calculate("code_quality", [("rater-a", None), ("rater-b", None)])
        
        assert entry.value is None
        assert entry.presented_value is None
        assert "abstained" in caplog.text
    
    def test_empty_pairs_is_null(self, calculator):
        """Test that no pairs at all give None."""
        assert calculator.weighted_average("code_quality", []) is None
    
    def test_nan_is_abstention(self, calculator):
        """Test that NaN values are treated as abstentions."""
        entry = calculator.calculate("code_quality", [("rater-a", math.nan), ("rater-b", 6.0)])
        
        assert entry.value == 6.0
        assert entry.abstained == ("rater-a",)
    
    def test_single_contributor_exact(self, calculator):
        """Test that a single contributor's value comes back unchanged."""
        for value in (0.1, 3.7, 9.99):
            assert calculator.weighted_average("code_quality", [("rater-b", value)]) == value


class TestDegenerateWeights:
    """Tests for zero and fallback weights."""
    
    def test_zero_total_weight_uses_unweighted_mean(self, caplog):
        """Test the unweighted fallback when every weight is zero."""
        registry = WeightRegistry(
            weights={"a": {"code_quality": 0.0}, "b": {"code_quality": 0.0}},
            dimensions=["code_quality"],
        )
        calculator = WeightedConsensusCalculator(registry)
        
        with caplog.at_level(logging.WARNING):
            entry = calculator.calculate("code_quality", [("a", 4.0), ("b", 8.0)])
        
        assert entry.value == pytest.approx(6.0)
        assert entry.unweighted_fallback
        assert "unweighted" in caplog.text
    
    def test_unknown_rater_uses_fallback_weight(self, calculator):
        """Test that an unknown rater blends in with an equal-share weight."""
        entry = calculator.calculate("code_quality", [("rater-a", 8.0), ("stranger", 4.0)])
        
        stranger = [c for c in entry.contributors if c.rater == "stranger"][0]
        assert stranger.weight.is_fallback
        assert entry.used_fallback_weights
        # 8*0.6 + 4*0.5 over 1.1
        assert entry.value == pytest.approx((8 * 0.6 + 4 * 0.5) / 1.1)
    
    def test_to_dict(self, calculator):
        """Test that the entry serializes with weight sources."""
        data = calculator.calculate("code_quality", [("rater-a", 8.0)], round_number=2).to_dict()
        
        assert data["round"] == 2
        assert data["contributors"][0]["weight_source"] == "known"

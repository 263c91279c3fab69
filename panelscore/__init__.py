"""
panelscore - Weighted Multi-Rater Consensus Core.

Turns the per-dimension scores of a panel of raters, collected over one or
more discussion rounds, into consensus values, and keeps an append-only
history of evaluations per subject.

Key Components:
- Weight Registry: per-dimension expertise weights of each rater
- Weighted Consensus Calculator: weighted average that respects abstentions
- Evolution Tracker: per-round consensus and the "changed" flag
- Convergence Estimator: agreement among the final round's raters
- Derived Metric Composer: net values and the commit score
- History Ledger: per-subject JSON history and its statistics

Quick Start:
    from panelscore import EvaluationPipeline, RaterOutput
    
    pipeline = EvaluationPipeline()
    result = pipeline.evaluate("a1b2c3", [
        RaterOutput(rater="developer-author", values={"code_quality": 7.0}),
        RaterOutput(rater="senior-architect", values={"code_quality": 8.0}),
    ])
    print(result.consensus["code_quality"].presented_value)
"""

__version__ = "1.0.0"

# Configuration and errors
from .config import PanelConfig, get_panel_config, reset_panel_config
from .errors import HistoryWriteError, PanelScoreError, RaterPayloadError

# Dimensions
from .dimensions import (
    Dimension,
    Polarity,
    ValueKind,
    dimension_names,
    get_dimension,
    round_for_presentation,
)

# Weights
from .weights import (
    FallbackWeight,
    KnownWeight,
    Weight,
    WeightRegistry,
    WeightViolation,
    get_weight_registry,
    reset_weight_registry,
)

# Rater outputs
from .raters import RaterOutput, TokenUsage, parse_rater_output, parse_rater_outputs

# Consensus
from .consensus import (
    ConsensusEntry,
    ConvergenceEstimator,
    ConvergenceScore,
    DerivedMetricComposer,
    WeightedConsensusCalculator,
    commit_score,
    net_value,
)

# Evolution
from .evolution import (
    EvolutionReport,
    EvolutionTracker,
    MetricEvolutionSeries,
    RoundMatrix,
    assign_rounds,
)

# History
from .history import (
    DimensionStatistics,
    EvaluationSnapshot,
    HistoryEntry,
    HistoryLedger,
    TokenSnapshot,
    compute_history_statistics,
)

# Pipeline
from .pipeline import (
    BatchEvaluationResult,
    EvaluationJob,
    EvaluationPipeline,
    EvaluationResult,
)

__all__ = [
    "__version__",
    # Configuration
    "PanelConfig",
    "get_panel_config",
    "reset_panel_config",
    # Errors
    "PanelScoreError",
    "HistoryWriteError",
    "RaterPayloadError",
    # Dimensions
    "Dimension",
    "Polarity",
    "ValueKind",
    "dimension_names",
    "get_dimension",
    "round_for_presentation",
    # Weights
    "Weight",
    "KnownWeight",
    "FallbackWeight",
    "WeightRegistry",
    "WeightViolation",
    "get_weight_registry",
    "reset_weight_registry",
    # Rater outputs
    "RaterOutput",
    "TokenUsage",
    "parse_rater_output",
    "parse_rater_outputs",
    # Consensus
    "ConsensusEntry",
    "WeightedConsensusCalculator",
    "ConvergenceEstimator",
    "ConvergenceScore",
    "DerivedMetricComposer",
    "commit_score",
    "net_value",
    # Evolution
    "EvolutionReport",
    "EvolutionTracker",
    "MetricEvolutionSeries",
    "RoundMatrix",
    "assign_rounds",
    # History
    "DimensionStatistics",
    "EvaluationSnapshot",
    "HistoryEntry",
    "HistoryLedger",
    "TokenSnapshot",
    "compute_history_statistics",
    # Pipeline
    "BatchEvaluationResult",
    "EvaluationJob",
    "EvaluationPipeline",
    "EvaluationResult",
]

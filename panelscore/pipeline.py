"""
Evaluation Pipeline for panelscore.

Runs one full evaluation of a subject from its rater outputs:

1. Evolution: rounds are assigned and every dimension gets a consensus
   per round
2. Convergence: agreement among the final round's raters
3. Derived values: composed from the final round's consensus values
4. Tokens: usage and estimated cost across all rater outputs
5. History: the evaluation is appended to the subject's ledger

Batch evaluation runs independent subjects on a thread pool.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import PanelConfig, get_panel_config
from .consensus import (
    ConsensusEntry,
    ConvergenceEstimator,
    ConvergenceScore,
    DerivedMetricComposer,
)
from .errors import PanelScoreError
from .evolution import EvolutionReport, EvolutionTracker
from .history import EvaluationSnapshot, HistoryEntry, HistoryLedger, TokenSnapshot
from .raters import RaterOutput, parse_rater_outputs
from .weights import WeightRegistry, get_weight_registry

logger = logging.getLogger(__name__)


@dataclass
class EvaluationJob:
    """One subject to evaluate in a batch."""
    subject_id: str
    outputs: List[RaterOutput]
    source: str = "unknown"
    timestamp: Optional[datetime] = None


@dataclass
class EvaluationResult:
    """
    Everything produced by one evaluation.
    
    Attributes:
        subject_id: Evaluated subject
        report: Per-dimension evolution across rounds
        consensus: dimension -> final-round ConsensusEntry
        convergence: Final-round convergence score
        derived: derived name -> value
        tokens: Token/cost snapshot
        entry: The persisted HistoryEntry
    """
    subject_id: str
    report: EvolutionReport
    consensus: Dict[str, ConsensusEntry]
    convergence: ConvergenceScore
    derived: Dict[str, Optional[float]]
    tokens: TokenSnapshot
    entry: HistoryEntry
    
    @property
    def evaluation_number(self) -> int:
        return self.entry.evaluation_number
    
    def presented_metrics(self) -> Dict[str, Optional[float]]:
        return {d: e.presented_value for d, e in self.consensus.items()}
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "evaluation_number": self.evaluation_number,
            "metrics": self.presented_metrics(),
            "consensus": {d: e.to_dict() for d, e in self.consensus.items()},
            "evolution": self.report.to_dict(),
            "convergence": self.convergence.to_dict(),
            "derived": dict(self.derived),
            "tokens": self.tokens.to_dict(),
            "history_entry": self.entry.to_dict(),
        }


@dataclass
class BatchEvaluationResult:
    """Results of a batch evaluation; failures map subject id -> error message."""
    results: List[EvaluationResult] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    
    @property
    def succeeded(self) -> int:
        return len(self.results)
    
    @property
    def failed(self) -> int:
        return len(self.failures)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "failures": dict(self.failures),
        }


class EvaluationPipeline:
    """
    End-to-end evaluation of a subject.
    
    Usage:
        pipeline = EvaluationPipeline(ledger=HistoryLedger(base_dir="history"))
        result = pipeline.evaluate("a1b2c3", outputs, source="post-commit")
        result.consensus["code_quality"].value
        result.evaluation_number
    """
    
    def __init__(
        self,
        registry: Optional[WeightRegistry] = None,
        ledger: Optional[HistoryLedger] = None,
        config: Optional[PanelConfig] = None,
    ):
        """
        Initialize the pipeline.
        
        Args:
            registry: WeightRegistry (global if None)
            ledger: HistoryLedger (one built from config if None)
            config: PanelConfig (global if None)
        """
        self.config = config or get_panel_config()
        self.registry = registry or get_weight_registry()
        self.ledger = ledger or HistoryLedger(config=self.config)
        
        self.tracker = EvolutionTracker(
            registry=self.registry,
            changed_threshold=self.config.changed_threshold,
        )
        self.convergence = ConvergenceEstimator(
            reference_dimension=self.config.convergence_dimension,
            min_panel_size=self.config.convergence_min_panel_size,
        )
        self.composer = DerivedMetricComposer()
    
    def evaluate(
        self,
        subject_id: str,
        outputs: Iterable[RaterOutput],
        source: str = "unknown",
        timestamp: Optional[datetime] = None,
    ) -> EvaluationResult:
        """
        Evaluate a subject and record the result in its history.
        
        Args:
            subject_id: Subject identifier (e.g. a commit hash)
            outputs: Time-ordered RaterOutputs of all rounds
            source: Label of what triggered the evaluation
            timestamp: Evaluation time (now if None)
        
        Returns:
            EvaluationResult
        
        Raises:
            ValueError: If there are no outputs or the subject id is invalid
            HistoryWriteError: If the history could not be persisted
        """
        outputs = list(outputs)
        if not outputs:
            raise ValueError(f"No rater outputs to evaluate for {subject_id}")
        
        report = self.tracker.track(outputs)
        matrix = report.matrix
        
        convergence = self.convergence.estimate(
            matrix.final_round_outputs(), panel_size=len(matrix.raters)
        )
        derived = self.composer.compose(report.latest_values())
        tokens = TokenSnapshot.from_outputs(
            outputs,
            input_price_per_million=self.config.input_price_per_million,
            output_price_per_million=self.config.output_price_per_million,
        )
        
        consensus = report.latest_consensus()
        snapshot = EvaluationSnapshot(
            metrics={d: e.presented_value for d, e in consensus.items()},
            tokens=tokens,
            convergence_score=convergence.value,
            derived={k: _round_derived(v) for k, v in derived.items()},
            source=source,
            timestamp=timestamp,
        )
        entry = self.ledger.append(subject_id, snapshot)
        
        logger.info(
            f"[PIPELINE] Evaluated {subject_id}: {len(matrix.raters)} raters, "
            f"{len(matrix.rounds)} rounds, convergence={convergence.value}"
        )
        
        return EvaluationResult(
            subject_id=subject_id,
            report=report,
            consensus=consensus,
            convergence=convergence,
            derived=derived,
            tokens=tokens,
            entry=entry,
        )
    
    def evaluate_payloads(
        self,
        subject_id: str,
        payloads: Sequence[Dict[str, Any]],
        source: str = "unknown",
        timestamp: Optional[datetime] = None,
    ) -> EvaluationResult:
        """Parse raw rater payloads and evaluate them."""
        outputs = parse_rater_outputs(payloads, registry=self.registry)
        return self.evaluate(subject_id, outputs, source=source, timestamp=timestamp)
    
    def evaluate_batch(
        self,
        jobs: Sequence[EvaluationJob],
        max_workers: Optional[int] = None,
    ) -> BatchEvaluationResult:
        """
        Evaluate independent subjects in parallel.
        
        A failing subject is recorded in ``failures`` and does not stop the
        others.
        
        Args:
            jobs: Subjects to evaluate
            max_workers: Thread pool size (config default if None)
        
        Returns:
            BatchEvaluationResult, results in job order
        """
        batch = BatchEvaluationResult()
        if not jobs:
            return batch
        
        workers = max(1, min(max_workers or self.config.batch_max_workers, len(jobs)))
        completed: Dict[int, EvaluationResult] = {}
        
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(
                    self.evaluate,
                    job.subject_id,
                    job.outputs,
                    job.source,
                    job.timestamp,
                ): index
                for index, job in enumerate(jobs)
            }
            
            for future in as_completed(futures):
                index = futures[future]
                subject_id = jobs[index].subject_id
                try:
                    completed[index] = future.result()
                except (PanelScoreError, ValueError) as e:
                    logger.warning(f"[PIPELINE] Evaluation of {subject_id} failed: {e}")
                    batch.failures[subject_id] = str(e)
        
        batch.results = [completed[i] for i in sorted(completed)]
        logger.info(
            f"[PIPELINE] Batch complete: {batch.succeeded} succeeded, {batch.failed} failed"
        )
        return batch


def _round_derived(value: Optional[float]) -> Optional[float]:
    return round(value, 2) if value is not None else None

"""
Round assignment for panelscore.

Rebuilds the rater x round matrix from a flat, time-ordered sequence of
RaterOutputs.

An explicit round on a RaterOutput always wins. Outputs without one fall
back to positional inference: the n-th time a rater appears in the
sequence, that output belongs to round n. Inference assumes every rater
takes part in every round; when participation is uneven the assignment may
be misaligned and a warning is logged.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..raters import RaterOutput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundAssignment:
    """A RaterOutput together with the round it was assigned to."""
    round: int
    output: RaterOutput
    inferred: bool = False


def infer_rounds_by_occurrence(outputs: Iterable[RaterOutput]) -> List[int]:
    """
    Positional round inference.
    
    Args:
        outputs: Time-ordered RaterOutputs
    
    Returns:
        Round number for each output, in input order
    """
    occurrences: Dict[str, int] = {}
    rounds = []
    for output in outputs:
        occurrences[output.rater] = occurrences.get(output.rater, 0) + 1
        rounds.append(occurrences[output.rater])
    return rounds


def assign_rounds(outputs: Iterable[RaterOutput]) -> List[RoundAssignment]:
    """
    Assign a round to every output.
    
    Explicit rounds are used as-is; the rest are inferred by occurrence.
    Deterministic: the same sequence always gives the same assignment.
    
    Args:
        outputs: Time-ordered RaterOutputs
    
    Returns:
        RoundAssignments in input order
    """
    outputs = list(outputs)
    inferred_rounds = infer_rounds_by_occurrence(outputs)
    
    assignments = []
    inferred_any = False
    for output, inferred_round in zip(outputs, inferred_rounds):
        if output.round is not None:
            assignments.append(RoundAssignment(round=output.round, output=output))
        else:
            inferred_any = True
            assignments.append(RoundAssignment(round=inferred_round, output=output, inferred=True))
    
    if inferred_any:
        counts = Counter(o.rater for o in outputs if o.round is None)
        if len(set(counts.values())) > 1:
            logger.warning(
                f"[EVOLUTION] Uneven participation while inferring rounds by position "
                f"({dict(counts)}); a skipped rater shifts its later outputs into "
                f"earlier rounds"
            )
    
    return assignments


class RoundMatrix:
    """
    Rater x round matrix of RaterOutputs.
    
    Raters keep their order of first appearance; rounds are sorted.
    A rater missing from a round simply has no cell there.
    """
    
    def __init__(self, assignments: Iterable[RoundAssignment]):
        self._cells: Dict[int, Dict[str, RaterOutput]] = {}
        self._raters: List[str] = []
        self.inferred = False
        
        for assignment in assignments:
            rater = assignment.output.rater
            if rater not in self._raters:
                self._raters.append(rater)
            if assignment.inferred:
                self.inferred = True
            
            row = self._cells.setdefault(assignment.round, {})
            if rater in row:
                logger.warning(
                    f"[EVOLUTION] Duplicate output for '{rater}' in round "
                    f"{assignment.round}; keeping the later one"
                )
            row[rater] = assignment.output
    
    @classmethod
    def from_outputs(cls, outputs: Iterable[RaterOutput]) -> "RoundMatrix":
        return cls(assign_rounds(outputs))
    
    @property
    def rounds(self) -> List[int]:
        return sorted(self._cells.keys())
    
    @property
    def raters(self) -> List[str]:
        return list(self._raters)
    
    @property
    def final_round(self) -> Optional[int]:
        rounds = self.rounds
        return rounds[-1] if rounds else None
    
    def get(self, rater: str, round_number: int) -> Optional[RaterOutput]:
        return self._cells.get(round_number, {}).get(rater)
    
    def outputs_for_round(self, round_number: int) -> List[RaterOutput]:
        """Outputs of one round, in rater order."""
        row = self._cells.get(round_number, {})
        return [row[r] for r in self._raters if r in row]
    
    def final_round_outputs(self) -> List[RaterOutput]:
        final = self.final_round
        return self.outputs_for_round(final) if final is not None else []
    
    def missing_cells(self) -> List[Tuple[str, int]]:
        """(rater, round) pairs where a rater delivered no output."""
        return [
            (rater, round_number)
            for round_number in self.rounds
            for rater in self._raters
            if rater not in self._cells[round_number]
        ]
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "raters": self.raters,
            "rounds": {
                str(r): [o.rater for o in self.outputs_for_round(r)] for r in self.rounds
            },
            "inferred": self.inferred,
        }

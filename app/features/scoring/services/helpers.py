from typing import Any, Dict, List, Optional

from app.features.scoring.schemas.result import DimensionResult, IssueDraft
from app.features.scoring.utils.issue_catalog import ISSUE_DEFINITIONS


class ScoreState:
    """Running score for one dimension. Starts at 100; every deduction records one issue."""

    def __init__(self):
        self.score = 100
        self.issues: List[IssueDraft] = []

    def deduct(
        self,
        code: str,
        penalty: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Subtract a penalty and append the matching issue.

        Args:
            code: Key into ISSUE_DEFINITIONS
            penalty: Points to subtract, defaults to the catalog penalty
            data: Rule-specific evidence stored on the issue
        """
        definition = ISSUE_DEFINITIONS[code]
        amount = definition.penalty if penalty is None else penalty
        self.score -= max(amount, 0)
        self.issues.append(
            IssueDraft(
                code=code,
                category=definition.category,
                severity=definition.severity,
                message=definition.message,
                recommendation=definition.recommendation,
                data=data,
            )
        )

    def result(self) -> DimensionResult:
        return DimensionResult(score=max(0, min(100, self.score)), issues=self.issues)


def llm_deduction(score: int, factor: float) -> int:
    """Penalty for a model-judged axis: round((100 - score) * factor)."""
    # Half-up rounding; Python's round() would send 2.5 to 2
    return int((100 - score) * factor + 0.5)

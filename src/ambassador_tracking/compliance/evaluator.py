"""
Compliance Evaluator

Rules:
- Pure functions only
- Integer comparison, no partial credit, no rounding
- Each category is judged independently
- expected == 0 is EXEMPT, never MET
"""

from typing import Optional

from ambassador_tracking.compliance.compliance_models import (
    ActivityCounts,
    CategoryVerdicts,
    Verdict,
)


def classify(actual: int, expected: int) -> Verdict:
    """
    Classify one category.

    Logic:
    - EXEMPT when nothing is required this period
    - MET when actual >= expected
    - UNMET otherwise
    """
    if expected == 0:
        return Verdict.EXEMPT
    if actual >= expected:
        return Verdict.MET
    return Verdict.UNMET


def evaluate(actual: ActivityCounts, expected: ActivityCounts) -> CategoryVerdicts:
    return CategoryVerdicts(
        story=classify(actual.stories, expected.stories),
        post=classify(actual.posts, expected.posts),
        reel=classify(actual.reels, expected.reels),
    )


def is_compliant(verdicts: CategoryVerdicts) -> bool:
    """
    Overall status used for ranking and rollups.

    Every category must be MET or EXEMPT, and an ambassador with no
    requirement anywhere (all EXEMPT) is not reported as compliant.
    """
    values = verdicts.as_tuple()
    if all(v is Verdict.EXEMPT for v in values):
        return False
    return all(v in (Verdict.MET, Verdict.EXEMPT) for v in values)


def met_count(verdicts: CategoryVerdicts) -> int:
    return sum(1 for v in verdicts.as_tuple() if v is Verdict.MET)


def compliance_score(verdicts: CategoryVerdicts) -> Optional[float]:
    """Percent of required (non-exempt) categories met; None when all exempt."""
    required = [v for v in verdicts.as_tuple() if v is not Verdict.EXEMPT]
    if not required:
        return None
    met = sum(1 for v in required if v is Verdict.MET)
    return round(met / len(required) * 100, 1)

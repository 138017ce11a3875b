"""Score to letter grade classification."""
from typing import Tuple

# (inclusive lower bound, label), highest band first
GRADE_BANDS: Tuple[Tuple[int, str], ...] = (
    (90, 'A+'),
    (80, 'A'),
    (70, 'B'),
    (60, 'C'),
    (50, 'D'),
    (0, 'F'),
)

GRADES = tuple(label for _, label in GRADE_BANDS)

def classify_score(score: int) -> str:
    """Return the grade of the highest band whose lower bound ``score`` meets.

    ``score`` must already be validated as an integer in [0, 100].
    """
    for lower_bound, label in GRADE_BANDS:
        if score >= lower_bound:
            return label
    return GRADE_BANDS[-1][1]

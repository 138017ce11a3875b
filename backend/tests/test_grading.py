"""Test score to grade classification."""
import pytest
from school_portal.services.grading import GRADE_BANDS, GRADES, classify_score

@pytest.mark.parametrize('score,grade', [
    (100, 'A+'),
    (90, 'A+'),
    (89, 'A'),
    (80, 'A'),
    (79, 'B'),
    (70, 'B'),
    (69, 'C'),
    (60, 'C'),
    (59, 'D'),
    (50, 'D'),
    (49, 'F'),
    (0, 'F'),
])
def test_band_boundaries(score, grade):
    assert classify_score(score) == grade

def test_bands_are_ordered_highest_first():
    bounds = [lower for lower, _ in GRADE_BANDS]
    assert bounds == sorted(bounds, reverse=True)
    assert bounds[-1] == 0

def test_every_score_maps_to_a_known_grade():
    assert {classify_score(score) for score in range(0, 101)} == set(GRADES)

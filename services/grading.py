"""
Grading policy for the School Marksheet System
Maps a subject total (formative + summative) to a letter grade and remark
"""

from collections import namedtuple

Grade = namedtuple('Grade', ['letter', 'remark'])

# (inclusive lower bound, letter, remark), highest first
GRADE_SCALE = (
    (90, 'A+', 'Outstanding'),
    (80, 'A', 'Very Good'),
    (70, 'B+', 'Good'),
    (60, 'B', 'Satisfactory'),
    (50, 'C', 'Pass'),
)

FAIL_GRADE = Grade('F', 'Fail')

GRADE_LETTERS = tuple(letter for _, letter, _ in GRADE_SCALE) + (FAIL_GRADE.letter,)

def grade_of(total):
    """Return the Grade for a total. Totals are not range-checked here."""
    for lower_bound, letter, remark in GRADE_SCALE:
        if total >= lower_bound:
            return Grade(letter, remark)
    return FAIL_GRADE

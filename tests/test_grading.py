"""
Unit tests for the grading policy
"""

import unittest

from services.grading import FAIL_GRADE, GRADE_LETTERS, grade_of

class TestGrading(unittest.TestCase):

    def test_band_boundaries(self):
        """Lower bounds are inclusive"""
        cases = [
            (100, 'A+'), (90, 'A+'), (89, 'A'), (80, 'A'), (79, 'B+'), (70, 'B+'),
            (69, 'B'), (60, 'B'), (59, 'C'), (50, 'C'), (49, 'F'), (0, 'F'),
        ]
        for total, letter in cases:
            with self.subTest(total=total):
                self.assertEqual(grade_of(total).letter, letter)

    def test_remarks(self):
        self.assertEqual(grade_of(95).remark, 'Outstanding')
        self.assertEqual(grade_of(85).remark, 'Very Good')
        self.assertEqual(grade_of(75).remark, 'Good')
        self.assertEqual(grade_of(65).remark, 'Satisfactory')
        self.assertEqual(grade_of(55).remark, 'Pass')
        self.assertEqual(grade_of(10), FAIL_GRADE)

    def test_out_of_range_totals_are_not_rejected(self):
        """Values outside 0-100 go through the same table"""
        self.assertEqual(grade_of(-5).letter, 'F')
        self.assertEqual(grade_of(150).letter, 'A+')

    def test_every_total_gets_exactly_one_known_letter(self):
        for total in range(0, 101):
            self.assertIn(grade_of(total).letter, GRADE_LETTERS)

    def test_grade_is_monotonic(self):
        order = {letter: rank for rank, letter in enumerate(reversed(GRADE_LETTERS))}
        previous = order[grade_of(0).letter]
        for total in range(1, 101):
            current = order[grade_of(total).letter]
            self.assertGreaterEqual(current, previous)
            previous = current

if __name__ == '__main__':
    unittest.main()

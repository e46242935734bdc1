import math

import pytest

from schemas.grading import DivisionLevel, GradeLevel, SubjectGrade
from services import liberian_grading as lg

CREDIT_GRADES = {
    GradeLevel.A1, GradeLevel.A2, GradeLevel.A3, GradeLevel.B2,
    GradeLevel.B3, GradeLevel.C4, GradeLevel.C5, GradeLevel.C6,
}


# ==========================================================
# classify
# ==========================================================

def test_every_integer_percentage_maps_to_one_level_monotonically():
    previous_points = 0
    for p in range(100, -1, -1):
        grade = lg.classify(p)
        assert isinstance(grade, GradeLevel)
        points = lg.LIBERIAN_GRADE_SCALE[grade].points
        assert points >= previous_points
        previous_points = points


@pytest.mark.parametrize("percentage,expected", [
    (100, GradeLevel.A1),
    (80, GradeLevel.A1),
    (79.99, GradeLevel.A2),
    (75, GradeLevel.A2),
    (70, GradeLevel.A3),
    (65, GradeLevel.B2),
    (60, GradeLevel.B3),
    (55, GradeLevel.C4),
    (50, GradeLevel.C5),
    (45, GradeLevel.C6),
    (44.5, GradeLevel.D7),
    (40, GradeLevel.D7),
    (35, GradeLevel.E8),
    (34.9, GradeLevel.F9),
    (0, GradeLevel.F9),
])
def test_band_boundaries(percentage, expected):
    assert lg.classify(percentage) == expected


def test_out_of_range_clamps_to_extreme_bands():
    assert lg.classify(150) == GradeLevel.A1
    assert lg.classify(-5) == GradeLevel.F9
    assert lg.classify(math.nan) == GradeLevel.F9


def test_credit_partition():
    for grade, info in lg.LIBERIAN_GRADE_SCALE.items():
        assert info.is_credit == (grade in CREDIT_GRADES)


def test_scale_table_is_read_only():
    with pytest.raises(TypeError):
        lg.LIBERIAN_GRADE_SCALE[GradeLevel.A1] = lg.LIBERIAN_GRADE_SCALE[GradeLevel.F9]


# ==========================================================
# final_grade
# ==========================================================

def test_final_grade_weighting():
    assert lg.final_grade(100, 0).final_score == 30
    assert lg.final_grade(0, 100).final_score == 70
    top = lg.final_grade(100, 100)
    assert top.final_score == 100
    assert top.grade == GradeLevel.A1
    assert top.grade_info.description == "Excellent"


def test_final_grade_rounds_half_up():
    # 15 * 0.3 = 4.5
    assert lg.final_grade(15, 0).final_score == 5


def test_final_grade_classifies_rounded_score():
    result = lg.final_grade(60, 40)   # 18 + 28 = 46
    assert result.final_score == 46
    assert result.grade == GradeLevel.C6


# ==========================================================
# check_eligibility
# ==========================================================

def _eligible_set():
    return [
        SubjectGrade(subject="English Language", grade=GradeLevel.B3),
        SubjectGrade(subject="Mathematics", grade=GradeLevel.C6),
        SubjectGrade(subject="Biology", grade=GradeLevel.A1),
        SubjectGrade(subject="Chemistry", grade=GradeLevel.C5),
        SubjectGrade(subject="Geography", grade=GradeLevel.C4),
        SubjectGrade(subject="French", grade=GradeLevel.F9),
    ]


def test_exactly_five_credits_with_english_and_math_is_eligible():
    result = lg.check_eligibility(_eligible_set())
    assert result.is_eligible
    assert result.credit_pass_count == 5
    assert result.has_english_credit and result.has_math_credit
    assert result.missing_requirements == []


def test_one_credit_short():
    grades = _eligible_set()
    grades[4] = SubjectGrade(subject="Geography", grade=GradeLevel.D7)
    result = lg.check_eligibility(grades)
    assert not result.is_eligible
    assert result.missing_requirements == ["Need 1 more credit passes"]


def test_english_not_credit():
    grades = _eligible_set()
    grades[0] = SubjectGrade(subject="English Language", grade=GradeLevel.E8)
    grades[5] = SubjectGrade(subject="French", grade=GradeLevel.A2)
    result = lg.check_eligibility(grades)
    assert not result.is_eligible
    assert result.credit_pass_count == 5
    assert result.missing_requirements == ["Credit pass in English/Language Arts required"]


def test_math_missing():
    grades = [g for g in _eligible_set() if g.subject != "Mathematics"]
    grades.append(SubjectGrade(subject="Physics", grade=GradeLevel.A1))
    result = lg.check_eligibility(grades)
    assert not result.is_eligible
    assert not result.has_math_credit
    assert result.missing_requirements == ["Credit pass in Mathematics required"]


def test_missing_requirements_order_when_everything_fails():
    result = lg.check_eligibility([])
    assert result.missing_requirements == [
        "Need 5 more credit passes",
        "Credit pass in English/Language Arts required",
        "Credit pass in Mathematics required",
    ]


def test_subject_match_is_case_insensitive_and_first_match_wins():
    grades = [
        SubjectGrade(subject="LANGUAGE ARTS", grade=GradeLevel.A1),
        SubjectGrade(subject="english literature", grade=GradeLevel.F9),
        SubjectGrade(subject="Further Maths", grade=GradeLevel.F9),
        SubjectGrade(subject="Mathematics", grade=GradeLevel.A1),
    ]
    result = lg.check_eligibility(grades)
    assert result.has_english_credit
    assert not result.has_math_credit


# ==========================================================
# aggregate_score / classify_division
# ==========================================================

def test_aggregate_uses_best_six():
    grades = [
        GradeLevel.A1, GradeLevel.A1, GradeLevel.A2, GradeLevel.A3,
        GradeLevel.B2, GradeLevel.B3, GradeLevel.D7, GradeLevel.F9,
    ]
    assert lg.aggregate_score(grades) == 1 + 1 + 2 + 3 + 4 + 5


def test_aggregate_with_fewer_than_six_grades_is_not_padded():
    assert lg.aggregate_score([GradeLevel.A1, GradeLevel.F9]) == 12
    assert lg.aggregate_score([]) == 0


@pytest.mark.parametrize("aggregate,expected", [
    (6, DivisionLevel.DIVISION_I),
    (24, DivisionLevel.DIVISION_I),
    (25, DivisionLevel.DIVISION_II),
    (36, DivisionLevel.DIVISION_II),
    (37, DivisionLevel.DIVISION_III),
    (48, DivisionLevel.DIVISION_III),
    (49, DivisionLevel.NO_DIVISION),
])
def test_division_boundaries(aggregate, expected):
    assert lg.classify_division(aggregate, True).division == expected


def test_division_requires_english_and_math_credit():
    result = lg.classify_division(6, False)
    assert result.division == DivisionLevel.NO_DIVISION
    assert result.description == "Must pass English and Mathematics with credit"


def test_summarize_results():
    summary = lg.summarize_results(_eligible_set())
    assert summary.eligibility.is_eligible
    # best six of 5,8,1,7,6,11
    assert summary.aggregate_score == 38
    assert summary.division.division == DivisionLevel.DIVISION_III


# ==========================================================
# score parsing / purity
# ==========================================================

@pytest.mark.parametrize("raw,expected", [
    ("85", 85.0),
    ("92.5", 92.5),
    ("85/100", 85.0),
    ("A+", 97.0),
    ("B-", 80.0),
    ("F", 50.0),
    ("Excellent", None),
    ("", None),
    (None, None),
])
def test_parse_score(raw, expected):
    assert lg.parse_score(raw) == expected


def test_numeric_score_treats_unparsed_as_zero():
    assert lg.numeric_score("incomplete") == 0.0
    assert lg.numeric_score("C+") == 77.0


def test_calculator_functions_are_idempotent():
    grades = _eligible_set()
    assert lg.check_eligibility(grades) == lg.check_eligibility(grades)
    assert lg.final_grade(72.5, 64) == lg.final_grade(72.5, 64)
    assert lg.classify(55) == lg.classify(55)
    assert lg.aggregate_score([g.grade for g in grades]) == lg.aggregate_score([g.grade for g in grades])


def test_out_of_range_numbers_are_unscored():
    assert lg.parse_score("1e400") is None
    assert lg.parse_score(math.inf) is None
    assert lg.numeric_score("1e400") == 0.0

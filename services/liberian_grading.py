"""
services/liberian_grading.py

- Liberian(WAEC) 성적 체계 계산기
- 모두 순수 함수: DB/네트워크 접근 없음, 입력이 이상해도 예외 대신 보수적인 기본값 반환
- 구성
  1) 등급표 / 백분율 → 등급 변환
  2) 최종 성적 (CA 30% + 외부 시험 70%)
  3) 대학 입학 자격, 합산 점수(best 6), 디비전 판정
  4) 점수 문자열 해석 (숫자 / 문자 등급)
"""

import logging
import math
import re
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

from schemas.grading import (
    AcademicTerm,
    DivisionLevel,
    DivisionResult,
    EligibilityResult,
    FinalGradeResult,
    GradeInfo,
    GradeLevel,
    SubjectGrade,
    WaecSummary,
)

logger = logging.getLogger(__name__)


# ==========================================================
# [1] 등급표
# ==========================================================

def _info(grade, description, percentage, lower_bound, points, is_credit):
    return GradeInfo(
        grade=grade,
        description=description,
        percentage=percentage,
        lower_bound=lower_bound,
        points=points,
        is_credit=is_credit,
    )


LIBERIAN_GRADE_SCALE: Mapping[GradeLevel, GradeInfo] = MappingProxyType({
    GradeLevel.A1: _info(GradeLevel.A1, "Excellent", "80-100%", 80, 1, True),
    GradeLevel.A2: _info(GradeLevel.A2, "Very Good", "75-79%", 75, 2, True),
    GradeLevel.A3: _info(GradeLevel.A3, "Good", "70-74%", 70, 3, True),
    GradeLevel.B2: _info(GradeLevel.B2, "Good", "65-69%", 65, 4, True),
    GradeLevel.B3: _info(GradeLevel.B3, "Good", "60-64%", 60, 5, True),
    GradeLevel.C4: _info(GradeLevel.C4, "Credit", "55-59%", 55, 6, True),
    GradeLevel.C5: _info(GradeLevel.C5, "Credit", "50-54%", 50, 7, True),
    GradeLevel.C6: _info(GradeLevel.C6, "Credit", "45-49%", 45, 8, True),
    GradeLevel.D7: _info(GradeLevel.D7, "Pass", "40-44%", 40, 9, False),
    GradeLevel.E8: _info(GradeLevel.E8, "Pass", "35-39%", 35, 10, False),
    GradeLevel.F9: _info(GradeLevel.F9, "Fail", "0-34%", 0, 11, False),
})

# (하한, 등급) 내림차순. 어느 하한에도 걸리지 않으면 F9
_GRADE_BANDS = tuple(
    (info.lower_bound, grade)
    for grade, info in LIBERIAN_GRADE_SCALE.items()
    if grade is not GradeLevel.F9
)

CREDIT_PASSES_REQUIRED = 5
BEST_OF = 6

CA_WEIGHT = 0.3
EXTERNAL_EXAM_WEIGHT = 0.7

LIBERIAN_ACADEMIC_TERMS = (
    AcademicTerm(term=1, name="First Term", start_month="September", end_month="December",
                 description="First term of the academic year"),
    AcademicTerm(term=2, name="Second Term", start_month="January", end_month="April",
                 description="Second term of the academic year"),
    AcademicTerm(term=3, name="Third Term", start_month="May", end_month="July",
                 description="Final term of the academic year"),
)

# 교육부 지정 핵심 과목
LIBERIAN_CORE_SUBJECTS = (
    "Language Arts (English)",
    "Mathematics",
    "General Science",
    "Social Studies",
)

WAEC_SUBJECTS = (
    "English Language",
    "Mathematics",
    "Biology",
    "Chemistry",
    "Physics",
    "Geography",
    "History",
    "Literature",
    "Economics",
    "Government",
    "French",
    "Agricultural Science",
)


def classify(percentage: float) -> GradeLevel:
    """
    백분율 → WAEC 등급
    - 0~100 범위 밖의 값도 거부하지 않음: 100 초과는 A1, 음수(및 NaN)는 F9
    """
    for lower_bound, grade in _GRADE_BANDS:
        if percentage >= lower_bound:
            return grade
    return GradeLevel.F9


def grade_info(grade: GradeLevel) -> GradeInfo:
    return LIBERIAN_GRADE_SCALE[GradeLevel(grade)]


# ==========================================================
# [2] 최종 성적
# ==========================================================

def _round_half_up(value: float) -> int:
    # x.5 는 올림 (음수가 아닌 점수 기준)
    return int(math.floor(value + 0.5))


def final_grade(continuous_assessment: float, external_examination: float) -> FinalGradeResult:
    """CA 30% + 외부 시험 70% 가중 평균을 정수로 반올림한 뒤 등급 부여"""
    final_score = _round_half_up(
        continuous_assessment * CA_WEIGHT + external_examination * EXTERNAL_EXAM_WEIGHT
    )
    grade = classify(final_score)
    return FinalGradeResult(final_score=final_score, grade=grade, grade_info=LIBERIAN_GRADE_SCALE[grade])


# ==========================================================
# [3] 자격 / 합산 / 디비전
# ==========================================================

def _is_english(subject: str) -> bool:
    name = subject.lower()
    return "english" in name or "language arts" in name


def _is_math(subject: str) -> bool:
    return "math" in subject.lower()


def check_eligibility(subject_grades: Sequence[SubjectGrade]) -> EligibilityResult:
    """
    대학 입학 자격: 크레딧(C6 이상) 5과목 이상 + 영어, 수학 크레딧
    - 영어/수학 과목은 과목명 부분 일치(대소문자 무시)로 찾고, 여러 개면 첫 번째만 본다
    """
    credit_pass_count = sum(1 for sg in subject_grades if LIBERIAN_GRADE_SCALE[sg.grade].is_credit)
    english = next((sg for sg in subject_grades if _is_english(sg.subject)), None)
    math_grade = next((sg for sg in subject_grades if _is_math(sg.subject)), None)

    has_english_credit = english is not None and LIBERIAN_GRADE_SCALE[english.grade].is_credit
    has_math_credit = math_grade is not None and LIBERIAN_GRADE_SCALE[math_grade.grade].is_credit

    missing = []
    if credit_pass_count < CREDIT_PASSES_REQUIRED:
        missing.append(f"Need {CREDIT_PASSES_REQUIRED - credit_pass_count} more credit passes")
    if not has_english_credit:
        missing.append("Credit pass in English/Language Arts required")
    if not has_math_credit:
        missing.append("Credit pass in Mathematics required")

    return EligibilityResult(
        is_eligible=(
            credit_pass_count >= CREDIT_PASSES_REQUIRED and has_english_credit and has_math_credit
        ),
        credit_pass_count=credit_pass_count,
        has_english_credit=has_english_credit,
        has_math_credit=has_math_credit,
        missing_requirements=missing,
    )


def aggregate_score(grades: Iterable[GradeLevel]) -> int:
    """최상위 6과목 환산 점수 합 (낮을수록 좋음). 6과목 미만이면 있는 만큼만 합산"""
    points = sorted(LIBERIAN_GRADE_SCALE[GradeLevel(g)].points for g in grades)
    return sum(points[:BEST_OF])


_DIVISION_BANDS = (
    (24, DivisionLevel.DIVISION_I,
     "Excellent performance - eligible for competitive university programs"),
    (36, DivisionLevel.DIVISION_II,
     "Good performance - eligible for most university programs"),
    (48, DivisionLevel.DIVISION_III,
     "Satisfactory performance - eligible for university admission"),
)


def classify_division(aggregate: int, has_english_and_math_credit: bool) -> DivisionResult:
    if not has_english_and_math_credit:
        return DivisionResult(
            division=DivisionLevel.NO_DIVISION,
            description="Must pass English and Mathematics with credit",
        )
    for upper_bound, division, description in _DIVISION_BANDS:
        if aggregate <= upper_bound:
            return DivisionResult(division=division, description=description)
    return DivisionResult(
        division=DivisionLevel.NO_DIVISION,
        description="Does not meet minimum requirements for division classification",
    )


def summarize_results(subject_grades: Sequence[SubjectGrade]) -> WaecSummary:
    """자격 판정 + 합산 점수 + 디비전을 한 번에 (마스터 성적표 학생 행)"""
    eligibility = check_eligibility(subject_grades)
    aggregate = aggregate_score(sg.grade for sg in subject_grades)
    division = classify_division(
        aggregate, eligibility.has_english_credit and eligibility.has_math_credit
    )
    return WaecSummary(eligibility=eligibility, aggregate_score=aggregate, division=division)


# ==========================================================
# [4] 점수 문자열 해석
# ==========================================================

LETTER_GRADE_PERCENTAGES: Mapping[str, float] = MappingProxyType({
    "A+": 97, "A": 93, "A-": 90,
    "B+": 87, "B": 83, "B-": 80,
    "C+": 77, "C": 73, "C-": 70,
    "D+": 67, "D": 63, "D-": 60,
    "F": 50,
})

# 문자열 앞부분의 숫자만 읽음 ("85/100" → 85)
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_score(score: Optional[str]) -> Optional[float]:
    """
    점수 문자열 → 백분율
    - 숫자로 시작하면 그 숫자, 아니면 문자 등급표(A+ ~ F)
    - 둘 다 아니면 None (0점과 구분되는 "채점 불가" 신호)
    """
    if score is None:
        return None
    if isinstance(score, (int, float)):
        return float(score) if math.isfinite(score) else None
    match = _LEADING_NUMBER.match(score)
    if match:
        value = float(match.group(1))
        # "1e400" 처럼 범위를 넘는 값은 채점 불가
        return value if math.isfinite(value) else None
    return LETTER_GRADE_PERCENTAGES.get(score)


def numeric_score(score: Optional[str]) -> float:
    """평균/임계값 비교용: 해석 불가 점수는 0으로 취급"""
    value = parse_score(score)
    if value is None:
        logger.warning("Unparsed score %r counted as 0", score)
        return 0.0
    return value

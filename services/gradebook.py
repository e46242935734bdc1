"""
services/gradebook.py

- 성적 입력 시 WAEC 등급 부여
- 마스터 성적표: 학생별 성적 요약, 반 전체 요약
- DB 없이 스키마 객체만 다루는 순수 함수
"""

import math
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from schemas.grades import GradeRecord, GradeRecordCreate
from schemas.grading import DivisionLevel, GradeLevel, SubjectGrade
from schemas.students import Student
from services import liberian_grading


class StudentPerformance(BaseModel):
    student_id: str
    name: str
    term_averages: Dict[int, float]        # 학기(1~3) → 평균
    overall_average: float
    credit_passes: int
    university_eligible: bool
    aggregate_score: int
    division: DivisionLevel


class ClassSummary(BaseModel):
    total_students: int
    total_grades: int
    average_score: float
    credit_pass_rate: float                # %
    university_eligible: int
    grade_distribution: Dict[GradeLevel, int]


TERMS = (1, 2, 3)


def _strict_number(score: Optional[str]) -> Optional[float]:
    """문자열 전체가 유한한 숫자일 때만 값 반환 (문자 등급, "85/100", "nan", "inf" 등은 평균에서 제외)"""
    if not score:
        return None
    try:
        value = float(score)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# ==========================================================
# [1단계] 성적 입력
# ==========================================================

def apply_liberian_grade(data: GradeRecordCreate) -> dict:
    """
    저장할 성적 필드 계산
    - CA + 외부 시험 점수가 모두 있으면 최종 점수로 score 를 덮어쓰고 등급 부여
    - 아니면 숫자 score 를 그대로 등급으로 변환 (문자 등급은 등급 없음)
    """
    fields = data.model_dump(exclude={"id"})
    if data.continuous_assessment is not None and data.external_examination is not None:
        result = liberian_grading.final_grade(data.continuous_assessment, data.external_examination)
        fields["score"] = str(result.final_score)
        fields["liberian_grade"] = result.grade.value
        return fields

    fields["score"] = data.score or ""
    numeric = _strict_number(data.score)
    fields["liberian_grade"] = liberian_grading.classify(numeric).value if numeric is not None else None
    return fields


# ==========================================================
# [2단계] 마스터 성적표
# ==========================================================

def _subject_grades(grades: Sequence[GradeRecord]) -> List[SubjectGrade]:
    return [
        SubjectGrade(subject=g.assignment_name, grade=g.liberian_grade)
        for g in grades
        if g.liberian_grade
    ]


def student_performance(student: Student, grades: Sequence[GradeRecord]) -> StudentPerformance:
    own = [g for g in grades if g.student_id == student.id]

    term_averages = {}
    for term in TERMS:
        scores = [n for n in (_strict_number(g.score) for g in own if g.term == term) if n is not None]
        term_averages[term] = _mean(scores)
    overall = [n for n in (_strict_number(g.score) for g in own) if n is not None]

    summary = liberian_grading.summarize_results(_subject_grades(own))
    return StudentPerformance(
        student_id=student.id,
        name=student.name,
        term_averages=term_averages,
        overall_average=_mean(overall),
        credit_passes=summary.eligibility.credit_pass_count,
        university_eligible=summary.eligibility.is_eligible,
        aggregate_score=summary.aggregate_score,
        division=summary.division.division,
    )


def class_summary(students: Sequence[Student], grades: Sequence[GradeRecord]) -> ClassSummary:
    student_ids = {s.id for s in students}
    own = [g for g in grades if g.student_id in student_ids]

    numeric = [n for n in (_strict_number(g.score) for g in own) if n is not None]
    distribution = {level: 0 for level in GradeLevel}
    credit_passes = 0
    for g in own:
        if g.liberian_grade:
            distribution[g.liberian_grade] += 1
            if liberian_grading.LIBERIAN_GRADE_SCALE[g.liberian_grade].is_credit:
                credit_passes += 1

    eligible = sum(
        1 for s in students
        if liberian_grading.check_eligibility(
            _subject_grades([g for g in own if g.student_id == s.id])
        ).is_eligible
    )

    return ClassSummary(
        total_students=len(students),
        total_grades=len(own),
        average_score=_mean(numeric),
        credit_pass_rate=(credit_passes / len(own) * 100) if own else 0.0,
        university_eligible=eligible,
        grade_distribution=distribution,
    )

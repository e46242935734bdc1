"""
schemas/grading.py

- Liberian(WAEC) 성적 체계에서 쓰는 값 타입 모음
- services/liberian_grading.py 의 계산 결과와 /grading 라우터 입출력에 공통 사용
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


# =========================================================
# 1) 등급/구분 열거형
# =========================================================

class GradeLevel(str, Enum):
    """WAEC 11단계 등급 (A1 최상 ~ F9 최하)"""
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    B2 = "B2"
    B3 = "B3"
    C4 = "C4"
    C5 = "C5"
    C6 = "C6"
    D7 = "D7"
    E8 = "E8"
    F9 = "F9"


class DivisionLevel(str, Enum):
    DIVISION_I = "Division I"
    DIVISION_II = "Division II"
    DIVISION_III = "Division III"
    NO_DIVISION = "No Division"


# =========================================================
# 2) 계산 결과 (불변 값)
# =========================================================

class GradeInfo(BaseModel):
    """등급표 한 줄: 설명, 점수 구간, 환산 점수, 크레딧 여부"""
    grade: GradeLevel
    description: str
    percentage: str                     # 표시용 구간 (예: "80-100%")
    lower_bound: float                  # 구간 하한 (포함)
    points: int                         # 1 = 최상, 11 = 최하 (합산 점수용)
    is_credit: bool

    model_config = ConfigDict(frozen=True)


class FinalGradeResult(BaseModel):
    final_score: int
    grade: GradeLevel
    grade_info: GradeInfo

    model_config = ConfigDict(frozen=True)


class SubjectGrade(BaseModel):
    subject: str                        # 과목명 (예: "English Language")
    grade: GradeLevel

    model_config = ConfigDict(frozen=True)


class EligibilityResult(BaseModel):
    """대학 입학 자격 판정 결과 (저장하지 않고 매번 새로 계산)"""
    is_eligible: bool
    credit_pass_count: int
    has_english_credit: bool
    has_math_credit: bool
    missing_requirements: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class DivisionResult(BaseModel):
    division: DivisionLevel
    description: str

    model_config = ConfigDict(frozen=True)


class WaecSummary(BaseModel):
    """학생 한 명의 자격/합산점수/디비전 묶음 (마스터 성적표용)"""
    eligibility: EligibilityResult
    aggregate_score: int
    division: DivisionResult

    model_config = ConfigDict(frozen=True)


class AcademicTerm(BaseModel):
    term: int
    name: str
    start_month: str
    end_month: str
    description: str

    model_config = ConfigDict(frozen=True)


# =========================================================
# 3) /grading 라우터 요청 바디
# =========================================================

class ClassifyRequest(BaseModel):
    percentage: float


class FinalGradeRequest(BaseModel):
    continuous_assessment: float = Field(..., description="내신(CA) 점수, 30% 반영")
    external_examination: float = Field(..., description="외부 시험 점수, 70% 반영")


class EligibilityRequest(BaseModel):
    subject_grades: List[SubjectGrade]


class AggregateRequest(BaseModel):
    grades: List[GradeLevel]


class DivisionRequest(BaseModel):
    aggregate_score: int
    has_english_and_math_credit: bool

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.classes import SchoolClass
from schemas.grades import GradeRecord
from schemas.point_rules import PointRule
from schemas.point_transactions import PointTransaction
from schemas.students import Student


# ✅ 규칙 엔진이 만들어내는 포인트 지급 제안
class PointRuleSuggestion(BaseModel):
    id: str                                  # 제안 고유 ID (배치 내 유일)
    rule_id: str                             # 근거 규칙 ID
    student_id: str
    teacher_id: str
    reason: str                              # 사람이 읽을 수 있는 근거 문장
    suggested_points: int
    is_applied: bool = False
    created_at: str                          # ISO 일시
    applied_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ 학생 한 명의 활동 스냅샷 (평가 1회분, 읽기 전용)
class RuleEvaluationContext(BaseModel):
    student: Student
    grades: List[GradeRecord] = Field(default_factory=list)
    point_transactions: List[PointTransaction] = Field(default_factory=list)
    classes: List[SchoolClass] = Field(default_factory=list)
    teacher_id: str


# ==========================================================
# [요청 바디]
# ==========================================================
class GenerateSuggestionsRequest(BaseModel):
    student_id: str
    teacher_id: str
    persist: bool = True                     # False면 저장 없이 미리보기만


class EvaluateSuggestionsRequest(BaseModel):
    """DB 없이 규칙 + 스냅샷을 직접 보내 평가 (순수 계산)"""
    rules: List[PointRule]
    context: RuleEvaluationContext
    now: Optional[datetime] = None           # 기준 시각 (미지정 시 서버 현재 시각)

"""
schemas/point_rules.py

- 포인트 규칙(PointRule) 입출력 스키마
- 조건(condition)은 6가지로 닫힌 집합: 새 규칙은 PointRuleCondition 중 하나만 허용
- 저장된 규칙은 폐기된 조건 문자열도 그대로 읽을 수 있어야 하므로 출력용은 str 허용
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PointRuleCondition(str, Enum):
    ATTENDANCE_PERFECT_WEEK = "attendance_perfect_week"
    ASSIGNMENT_SUBMITTED_EARLY = "assignment_submitted_early"
    ASSIGNMENT_HIGH_SCORE = "assignment_high_score"
    PARTICIPATION_ACTIVE = "participation_active"
    BEHAVIOR_EXCELLENT = "behavior_excellent"
    IMPROVEMENT_SIGNIFICANT = "improvement_significant"


class PointRuleTrigger(str, Enum):
    AUTOMATIC = "automatic"
    TEACHER_SUGGESTION = "teacher_suggestion"


# 관리 화면 표시용 라벨/설명
CONDITION_LABELS = {
    PointRuleCondition.ATTENDANCE_PERFECT_WEEK: (
        "Perfect Weekly Attendance", "Student has perfect attendance for a full week"),
    PointRuleCondition.ASSIGNMENT_SUBMITTED_EARLY: (
        "Early Assignment Submission", "Student submits assignment before due date"),
    PointRuleCondition.ASSIGNMENT_HIGH_SCORE: (
        "High Assignment Score", "Student achieves high score on assignment"),
    PointRuleCondition.PARTICIPATION_ACTIVE: (
        "Active Participation", "Student shows active participation in class"),
    PointRuleCondition.BEHAVIOR_EXCELLENT: (
        "Excellent Behavior", "Student demonstrates excellent behavior"),
    PointRuleCondition.IMPROVEMENT_SIGNIFICANT: (
        "Significant Improvement", "Student shows significant improvement in performance"),
}


# ==========================================================
# [조건별 파라미터]
# ==========================================================
class PointRuleParameters(BaseModel):
    min_score: Optional[float] = Field(default=None, ge=0, le=100)               # assignment_high_score
    days_early: Optional[int] = Field(default=None, ge=1, le=30)                 # assignment_submitted_early
    improvement_threshold: Optional[float] = Field(default=None, ge=1, le=50)    # improvement_significant
    subject_id: Optional[str] = None                                             # 과목 제한
    grade_level_restriction: Optional[int] = Field(default=None, ge=1, le=12)    # 학년 제한

    model_config = ConfigDict(extra="ignore")


# ==========================================================
# [입력용 스키마]
# ==========================================================
class PointRuleCreate(BaseModel):
    name: str
    description: str
    condition: PointRuleCondition
    point_value: int = Field(10, ge=1, le=100)
    trigger: PointRuleTrigger = PointRuleTrigger.TEACHER_SUGGESTION
    is_active: bool = True
    created_by: str
    parameters: PointRuleParameters = Field(default_factory=PointRuleParameters)

    @field_validator("name", "description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class PointRuleUpdate(BaseModel):
    """부분 수정 (보낸 필드만 반영)"""
    name: Optional[str] = None
    description: Optional[str] = None
    condition: Optional[PointRuleCondition] = None
    point_value: Optional[int] = Field(default=None, ge=1, le=100)
    trigger: Optional[PointRuleTrigger] = None
    is_active: Optional[bool] = None
    parameters: Optional[PointRuleParameters] = None


# ==========================================================
# [출력용 스키마]
# ==========================================================
class PointRule(BaseModel):
    id: str
    name: str
    description: str = ""
    # 알 수 없는 조건은 문자열 그대로 유지
    condition: Union[PointRuleCondition, str] = Field(union_mode="left_to_right")
    point_value: int
    trigger: PointRuleTrigger = PointRuleTrigger.TEACHER_SUGGESTION
    is_active: bool = True
    created_by: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    parameters: PointRuleParameters = Field(default_factory=PointRuleParameters)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("parameters", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return v if v is not None else {}

from sqlalchemy import Boolean, Column, Integer, String, Text
from database.db import Base


class PointSuggestion(Base):
    __tablename__ = "point_suggestions"  # 규칙 엔진이 만든 포인트 지급 제안

    id = Column(String(200), primary_key=True, index=True)          # 엔진이 생성한 제안 ID
    rule_id = Column(String(64), nullable=False, index=True)        # 근거 규칙 ID
    student_id = Column(String(64), nullable=False, index=True)     # 대상 학생 ID
    teacher_id = Column(String(64), nullable=False)                 # 검토할 교사 ID
    reason = Column(Text, nullable=False)                           # 근거 문장
    suggested_points = Column(Integer, nullable=False)              # 제안 포인트
    is_applied = Column(Boolean, nullable=False, default=False)     # 교사가 승인했는지
    created_at = Column(String(40), nullable=False)                 # 생성 일시 (ISO)
    applied_at = Column(String(40))                                 # 승인 일시 (ISO)

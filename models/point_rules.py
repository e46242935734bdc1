import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from database.db import Base


class PointRule(Base):
    __tablename__ = "point_rules"  # 관리자가 설정하는 포인트 규칙

    id = Column(String(64), primary_key=True, index=True, default=lambda: uuid.uuid4().hex)  # 규칙 고유 ID
    name = Column(String(100), nullable=False)                      # 규칙 이름
    description = Column(Text, nullable=False, default="")          # 설명
    condition = Column(String(50), nullable=False)                  # 조건 종류 (6가지)
    point_value = Column(Integer, nullable=False)                   # 지급 포인트
    trigger = Column(String(30), nullable=False, default="teacher_suggestion")  # automatic / teacher_suggestion
    is_active = Column(Boolean, nullable=False, default=True)       # 활성 여부
    created_by = Column(String(64), nullable=False, default="")     # 생성한 관리자 ID
    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))
    parameters = Column(JSON, nullable=False, default=dict)         # min_score, days_early 등

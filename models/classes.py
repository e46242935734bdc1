import uuid

from sqlalchemy import JSON, Column, String
from database.db import Base


class SchoolClass(Base):
    __tablename__ = "school_classes"

    id = Column(String(64), primary_key=True, index=True, default=lambda: uuid.uuid4().hex)  # 학급 고유 ID
    name = Column(String(100), nullable=False)                      # 반 이름
    description = Column(String(200))

    # ==========================================================
    # [소속 목록]
    # ==========================================================
    # 규칙 엔진은 "학생이 특정 과목 반에 속해 있는가"만 보므로 ID 목록(JSON)으로 보관
    student_ids = Column(JSON, nullable=False, default=list)
    subject_ids = Column(JSON, nullable=False, default=list)
    teacher_ids = Column(JSON, nullable=False, default=list)

import uuid

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database.db import Base
from models.attendance import AttendanceRecord


class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(String(64), primary_key=True, index=True, default=lambda: uuid.uuid4().hex)  # 학생 고유 ID
    name = Column(String(100), nullable=False)                      # 학생 이름
    grade = Column(Integer, nullable=False)                         # 학년 (1~12, 규칙의 학년 제한과 비교)
    points = Column(Integer, nullable=False, default=0)             # 누적 포인트
    parent_id = Column(String(64))                                  # 보호자 사용자 ID

    # ✅ 출결 기록 (1:N), 날짜순
    attendance = relationship(
        AttendanceRecord,
        back_populates="student",
        order_by=AttendanceRecord.date,
        cascade="all, delete-orphan",
    )

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from database.db import Base


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"  # 출결 기록 테이블

    id = Column(Integer, primary_key=True, index=True)                              # 출결 고유 ID
    student_id = Column(String(64), ForeignKey("students.id"), nullable=False, index=True)  # 학생 ID
    date = Column(String(40), nullable=False)                                       # 날짜 (ISO 문자열)
    status = Column(String(20), nullable=False)                                     # present / absent / late

    student = relationship("Student", back_populates="attendance")

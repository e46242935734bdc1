import uuid

from sqlalchemy import Boolean, Column, Float, Integer, String, Text
from database.db import Base


class GradeRecord(Base):
    __tablename__ = "grade_records"  # 과제/시험 성적 테이블

    id = Column(String(64), primary_key=True, index=True, default=lambda: uuid.uuid4().hex)  # 성적 고유 ID
    student_id = Column(String(64), nullable=False, index=True)     # 학생 ID
    class_id = Column(String(64), nullable=False)                   # 반 ID
    subject_id = Column(String(64))                                 # 과목 ID
    assignment_name = Column(String(200), nullable=False)           # 과제/과목명
    score = Column(String(20), nullable=False, default="")          # 숫자("85") 또는 문자 등급("A-")
    max_score = Column(Float)                                       # 만점
    date_assigned = Column(String(40))                              # 출제일 (ISO)
    due_date = Column(String(40))                                   # 마감일 (ISO)
    submission_date = Column(String(40))                            # 제출 일시 (ISO)
    teacher_comments = Column(Text)                                 # 교사 코멘트
    status = Column(String(30))                                     # Upcoming / Submitted / Graded 등
    liberian_grade = Column(String(2))                              # WAEC 등급 (A1 ~ F9)
    continuous_assessment = Column(Float)                           # 내신(CA) 점수
    external_examination = Column(Float)                            # 외부 시험 점수
    term = Column(Integer, nullable=False, default=1)               # 학기 (1~3)
    is_waec_subject = Column(Boolean, nullable=False, default=False)

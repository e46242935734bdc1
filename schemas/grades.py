from pydantic import BaseModel, ConfigDict
from typing import Optional

from schemas.grading import GradeLevel


# ==========================================================
# [입력용 스키마]
# ==========================================================
class GradeRecordCreate(BaseModel):
    id: Optional[str] = None                        # 지정하지 않으면 서버에서 생성
    student_id: str                                 # 학생 ID
    class_id: str                                   # 반 ID
    subject_id: Optional[str] = None                # 과목 ID
    assignment_name: str                            # 과제/과목명 (예: "Mathematics - Chapter 5 Test")
    score: Optional[str] = None                     # 숫자("85") 또는 문자 등급("A-")
    max_score: Optional[float] = None               # 만점
    date_assigned: Optional[str] = None             # 출제일 (ISO)
    due_date: Optional[str] = None                  # 마감일 (ISO)
    submission_date: Optional[str] = None           # 제출 일시 (ISO)
    teacher_comments: Optional[str] = None
    status: Optional[str] = None                    # Upcoming / Pending Submission / Submitted / Graded
    continuous_assessment: Optional[float] = None   # 내신(CA) 점수
    external_examination: Optional[float] = None    # 외부 시험 점수
    term: int = 1                                   # 학기 (1~3)
    is_waec_subject: bool = False


# ==========================================================
# [출력용 스키마]
# ==========================================================
class GradeRecord(GradeRecordCreate):
    id: str
    score: str = ""
    liberian_grade: Optional[GradeLevel] = None     # 계산된 WAEC 등급

    model_config = ConfigDict(from_attributes=True)

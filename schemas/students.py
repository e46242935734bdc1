from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


# ✅ 출결 한 건 (ISO 날짜 문자열 + 상태)
class AttendanceRecord(BaseModel):
    date: str                                # 출결 일자 (예: "2024-09-02")
    status: AttendanceStatus                 # present / absent / late

    model_config = ConfigDict(from_attributes=True)


# ✅ 입력용 (POST)
class StudentCreate(BaseModel):
    id: Optional[str] = None                 # 지정하지 않으면 서버에서 생성
    name: str                                # 학생 이름
    grade: int = Field(..., ge=1, le=12)     # 학년 (1~12)
    points: int = 0                          # 누적 포인트
    parent_id: Optional[str] = None          # 보호자 사용자 ID


# ✅ 전체 출력용 (GET, 상세조회, 규칙 엔진 입력)
class Student(BaseModel):
    id: str
    name: str
    grade: int
    points: int = 0
    parent_id: Optional[str] = None
    attendance: List[AttendanceRecord] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class AwardPointsRequest(BaseModel):
    points: int                              # 음수면 차감
    reason: str
    teacher_id: str


# ✅ 포인트 순위표 한 줄 (누적 포인트 내림차순, 1위부터)
class LeaderboardEntry(BaseModel):
    rank: int
    id: str
    name: str
    grade: int
    points: int

    model_config = ConfigDict(from_attributes=True)

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ✅ 입력용
class SchoolClassCreate(BaseModel):
    id: Optional[str] = None
    name: str                                            # 반 이름 (예: "Grade 9 - Section A")
    student_ids: List[str] = Field(default_factory=list)
    subject_ids: List[str] = Field(default_factory=list)
    teacher_ids: List[str] = Field(default_factory=list)
    description: Optional[str] = None


# ✅ 출력용 (규칙 엔진의 과목 수강 여부 판단에도 사용)
class SchoolClass(SchoolClassCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)

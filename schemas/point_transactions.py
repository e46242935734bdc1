from pydantic import BaseModel, ConfigDict


class PointTransaction(BaseModel):
    id: str                                  # 거래 고유 ID
    student_id: str                          # 학생 ID
    teacher_id: str                          # 지급한 교사 ID
    points: int                              # 부호 있는 포인트 (음수 = 차감)
    reason: str                              # 지급 사유
    date: str                                # 지급 일자 (ISO, "YYYY-MM-DD")

    model_config = ConfigDict(from_attributes=True)

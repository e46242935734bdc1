import uuid

from sqlalchemy import Column, Integer, String
from database.db import Base


class PointTransaction(Base):
    __tablename__ = "point_transactions"  # 포인트 지급/차감 내역

    id = Column(String(64), primary_key=True, index=True, default=lambda: uuid.uuid4().hex)  # 거래 고유 ID
    student_id = Column(String(64), nullable=False, index=True)     # 학생 ID
    teacher_id = Column(String(64), nullable=False)                 # 지급 교사 ID
    points = Column(Integer, nullable=False)                        # 부호 있는 포인트
    reason = Column(String(500), nullable=False)                    # 사유
    date = Column(String(40), nullable=False)                       # 지급 일자 (YYYY-MM-DD)

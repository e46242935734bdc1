from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import SessionLocal
from models.attendance import AttendanceRecord as AttendanceModel
from models.point_transactions import PointTransaction as TransactionModel
from models.students import Student as StudentModel
from schemas.point_transactions import PointTransaction
from schemas.students import AttendanceRecord, AwardPointsRequest, Student, StudentCreate
from services import point_service

router = APIRouter(prefix="/students", tags=["학생 정보"])

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 학생 정보 추가
@router.post("/")
def create_student(student: StudentCreate, db: Session = Depends(get_db)):
    db_student = StudentModel(**student.model_dump(exclude_none=True))
    db.add(db_student)
    db.commit()
    db.refresh(db_student)
    return {
        "success": True,
        "data": Student.model_validate(db_student).model_dump(),
        "message": "학생 정보가 성공적으로 추가되었습니다"
    }


# ✅ [READ] 전체 학생 조회 (grade 지정 시 해당 학년만)
@router.get("/")
def read_students(grade: int = None, db: Session = Depends(get_db)):
    query = db.query(StudentModel)
    if grade is not None:
        query = query.filter(StudentModel.grade == grade)
    return {
        "success": True,
        "data": [Student.model_validate(s).model_dump() for s in query.all()],
        "message": "전체 학생 정보 조회 완료"
    }


# ✅ [READ] 포인트 순위표 (grade 지정 시 해당 학년만). /{student_id} 보다 먼저 등록
@router.get("/leaderboard")
def read_leaderboard(grade: int = None, db: Session = Depends(get_db)):
    entries = point_service.leaderboard(db, grade=grade)
    return {
        "success": True,
        "data": [e.model_dump() for e in entries],
        "message": "포인트 순위표 조회 완료"
    }


# ✅ [READ] 학생 상세 (출결 포함)
@router.get("/{student_id}")
def read_student(student_id: str, db: Session = Depends(get_db)):
    student = point_service.get_student_model(db, student_id)
    return {
        "success": True,
        "data": Student.model_validate(student).model_dump(),
        "message": "학생 상세 정보 조회 완료"
    }


# ==========================================================
# [2단계] 출결 / 포인트
# ==========================================================

# ✅ [CREATE] 출결 기록 추가
@router.post("/{student_id}/attendance")
def add_attendance(student_id: str, record: AttendanceRecord, db: Session = Depends(get_db)):
    point_service.get_student_model(db, student_id)
    db_record = AttendanceModel(student_id=student_id, date=record.date, status=record.status.value)
    db.add(db_record)
    db.commit()
    return {
        "success": True,
        "data": {"student_id": student_id, "date": record.date, "status": record.status.value},
        "message": "출결 정보가 등록되었습니다"
    }


# ✅ [CREATE] 포인트 직접 지급/차감
@router.post("/{student_id}/points")
def award_points(student_id: str, body: AwardPointsRequest, db: Session = Depends(get_db)):
    transaction = point_service.award_points(db, student_id, body.points, body.reason, body.teacher_id)
    return {
        "success": True,
        "data": transaction.model_dump(),
        "message": f"{body.points} 포인트가 반영되었습니다"
    }


# ✅ [READ] 포인트 내역
@router.get("/{student_id}/points")
def read_point_history(student_id: str, db: Session = Depends(get_db)):
    point_service.get_student_model(db, student_id)
    records = (
        db.query(TransactionModel)
        .filter(TransactionModel.student_id == student_id)
        .order_by(TransactionModel.date)
        .all()
    )
    return {
        "success": True,
        "data": [PointTransaction.model_validate(r).model_dump() for r in records],
        "message": "포인트 내역 조회 완료"
    }

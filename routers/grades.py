from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import SessionLocal
from models.grades import GradeRecord as GradeModel
from schemas.grades import GradeRecord, GradeRecordCreate
from services import gradebook

router = APIRouter(prefix="/grades", tags=["grades"])

# ==========================================================
# [공통] DB 세션 관리
# ==========================================================
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 성적 입력 (CA + 외부 시험 또는 점수로 WAEC 등급 자동 부여)
@router.post("/")
def create_grade(grade: GradeRecordCreate, db: Session = Depends(get_db)):
    fields = gradebook.apply_liberian_grade(grade)
    db_grade = GradeModel(**fields) if grade.id is None else GradeModel(id=grade.id, **fields)
    db.add(db_grade)
    db.commit()
    db.refresh(db_grade)
    return {
        "success": True,
        "data": GradeRecord.model_validate(db_grade).model_dump(),
        "message": "성적이 성공적으로 추가되었습니다"
    }


# ✅ [READ] 성적 조회 (student_id / class_id 필터)
@router.get("/")
def read_grades(student_id: str = None, class_id: str = None, db: Session = Depends(get_db)):
    query = db.query(GradeModel)
    if student_id:
        query = query.filter(GradeModel.student_id == student_id)
    if class_id:
        query = query.filter(GradeModel.class_id == class_id)
    return {
        "success": True,
        "data": [GradeRecord.model_validate(g).model_dump() for g in query.all()],
        "message": "성적 조회 완료"
    }


# ✅ [DELETE] 성적 삭제
@router.delete("/{grade_id}")
def delete_grade(grade_id: str, db: Session = Depends(get_db)):
    grade = db.query(GradeModel).filter(GradeModel.id == grade_id).first()
    if not grade:
        raise HTTPException(status_code=404, detail="성적 정보가 없습니다.")
    db.delete(grade)
    db.commit()
    return {"success": True, "data": {"id": grade_id}, "message": "성적 정보가 삭제되었습니다."}

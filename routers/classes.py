from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import SessionLocal
from models.classes import SchoolClass as ClassModel
from schemas.classes import SchoolClass, SchoolClassCreate

router = APIRouter(prefix="/classes", tags=["학급 정보"])

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ✅ [CREATE] 학급 추가 (학생/과목/교사 ID 목록 포함)
@router.post("/")
def create_class(school_class: SchoolClassCreate, db: Session = Depends(get_db)):
    db_class = ClassModel(**school_class.model_dump(exclude_none=True))
    db.add(db_class)
    db.commit()
    db.refresh(db_class)
    return {
        "success": True,
        "data": SchoolClass.model_validate(db_class).model_dump(),
        "message": "학급 정보가 성공적으로 추가되었습니다"
    }


# ✅ [READ] 전체 학급 조회
@router.get("/")
def read_classes(db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": [SchoolClass.model_validate(c).model_dump() for c in db.query(ClassModel).all()],
        "message": "전체 학급 조회 완료"
    }

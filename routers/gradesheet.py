from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import SessionLocal
from models.classes import SchoolClass as ClassModel
from models.grades import GradeRecord as GradeModel
from models.students import Student as StudentModel
from schemas.grades import GradeRecord
from schemas.students import Student
from services import gradebook, point_service

router = APIRouter(prefix="/gradesheet", tags=["마스터 성적표"])

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ✅ [SUMMARY] 반(또는 전체) 성적 요약: 평균, 크레딧 비율, 입학 자격자 수, 등급 분포
@router.get("/summary")
def get_gradesheet_summary(class_id: str = None, db: Session = Depends(get_db)):
    query = db.query(StudentModel)
    grade_query = db.query(GradeModel)
    if class_id:
        school_class = db.query(ClassModel).filter(ClassModel.id == class_id).first()
        if not school_class:
            raise HTTPException(status_code=404, detail="해당 학급이 없습니다")
        query = query.filter(StudentModel.id.in_(school_class.student_ids or []))
        grade_query = grade_query.filter(GradeModel.class_id == class_id)

    students = [Student.model_validate(s) for s in query.all()]
    grades = [GradeRecord.model_validate(g) for g in grade_query.all()]
    summary = gradebook.class_summary(students, grades)
    return {"success": True, "data": summary.model_dump(), "message": "성적 요약 조회 완료"}


# ✅ [READ] 학생별 성적 요약: 학기 평균, 크레딧 수, 입학 자격, 디비전
@router.get("/students/{student_id}")
def get_student_performance(student_id: str, db: Session = Depends(get_db)):
    student = Student.model_validate(point_service.get_student_model(db, student_id))
    grades = [
        GradeRecord.model_validate(g)
        for g in db.query(GradeModel).filter(GradeModel.student_id == student_id).all()
    ]
    performance = gradebook.student_performance(student, grades)
    return {"success": True, "data": performance.model_dump(), "message": "학생 성적 요약 조회 완료"}

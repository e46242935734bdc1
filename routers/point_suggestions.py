from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import SessionLocal
from schemas.point_suggestions import EvaluateSuggestionsRequest, GenerateSuggestionsRequest
from services import point_service
from services.point_rule_engine import PointRuleEngine

router = APIRouter(prefix="/point-suggestions", tags=["포인트 제안"])

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
# [1단계] 제안 생성
# ==========================================================

# ✅ [CREATE] 학생 한 명에 대해 활성 규칙 평가 → 제안 생성 (persist=false 면 미리보기)
@router.post("/generate")
def generate_suggestions(body: GenerateSuggestionsRequest, db: Session = Depends(get_db)):
    suggestions = point_service.generate_for_student(
        db, body.student_id, body.teacher_id, persist=body.persist
    )
    return {
        "success": True,
        "data": [s.model_dump() for s in suggestions],
        "message": f"{len(suggestions)}건의 포인트 제안이 생성되었습니다"
    }


# ✅ DB 없이 규칙 + 스냅샷을 직접 평가
@router.post("/evaluate")
def evaluate_snapshot(body: EvaluateSuggestionsRequest):
    suggestions = PointRuleEngine(body.rules).generate_suggestions(body.context, now=body.now)
    return {
        "success": True,
        "data": [s.model_dump() for s in suggestions],
        "message": f"{len(suggestions)}건의 포인트 제안"
    }


# ==========================================================
# [2단계] 조회 / 승인 / 기각
# ==========================================================

# ✅ [READ] 제안 목록 (학생/교사/미승인 필터)
@router.get("/")
def read_suggestions(
    student_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    pending_only: bool = False,
    db: Session = Depends(get_db),
):
    suggestions = point_service.list_suggestions(
        db, student_id=student_id, teacher_id=teacher_id, pending_only=pending_only
    )
    return {
        "success": True,
        "data": [s.model_dump() for s in suggestions],
        "message": "포인트 제안 조회 완료"
    }


# ✅ [UPDATE] 제안 승인 → 포인트 지급
@router.post("/{suggestion_id}/apply")
def apply_suggestion(suggestion_id: str, db: Session = Depends(get_db)):
    suggestion = point_service.apply_suggestion(db, suggestion_id)
    return {
        "success": True,
        "data": suggestion.model_dump(),
        "message": f"{suggestion.suggested_points} 포인트가 지급되었습니다"
    }


# ✅ [DELETE] 제안 기각
@router.delete("/{suggestion_id}")
def dismiss_suggestion(suggestion_id: str, db: Session = Depends(get_db)):
    point_service.dismiss_suggestion(db, suggestion_id)
    return {"success": True, "data": {"id": suggestion_id}, "message": "포인트 제안이 기각되었습니다"}

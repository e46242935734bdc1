from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import SessionLocal
from schemas.point_rules import CONDITION_LABELS, PointRuleCreate, PointRuleUpdate
from services import point_service

router = APIRouter(prefix="/point-rules", tags=["포인트 규칙"])

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
# [1단계] 정적 라우터
# ==========================================================

# ✅ [READ] 지원하는 조건 목록 (관리 화면 선택지)
@router.get("/conditions")
def list_conditions():
    return {
        "success": True,
        "data": [
            {"value": condition.value, "label": label, "description": description}
            for condition, (label, description) in CONDITION_LABELS.items()
        ],
        "message": "포인트 규칙 조건 목록 조회 완료"
    }


# ==========================================================
# [2단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 규칙 추가
@router.post("/")
def create_point_rule(rule: PointRuleCreate, db: Session = Depends(get_db)):
    created = point_service.create_rule(db, rule)
    return {
        "success": True,
        "data": created.model_dump(mode="json"),
        "message": "포인트 규칙이 성공적으로 추가되었습니다"
    }


# ✅ [READ] 전체 규칙 조회 (active_only=true 면 활성 규칙만)
@router.get("/")
def read_point_rules(active_only: bool = False, db: Session = Depends(get_db)):
    rules = point_service.list_rules(db, active_only=active_only)
    return {
        "success": True,
        "data": [r.model_dump(mode="json") for r in rules],
        "message": "포인트 규칙 조회 완료"
    }


# ✅ [READ] 규칙 상세
@router.get("/{rule_id}")
def read_point_rule(rule_id: str, db: Session = Depends(get_db)):
    rule = point_service.get_rule(db, rule_id)
    return {"success": True, "data": rule.model_dump(mode="json"), "message": "포인트 규칙 상세 조회 완료"}


# ✅ [UPDATE] 규칙 수정 (보낸 필드만)
@router.put("/{rule_id}")
def update_point_rule(rule_id: str, updated: PointRuleUpdate, db: Session = Depends(get_db)):
    rule = point_service.update_rule(db, rule_id, updated)
    return {"success": True, "data": rule.model_dump(mode="json"), "message": "포인트 규칙이 수정되었습니다"}


# ✅ [DELETE] 규칙 삭제 (관련 제안도 함께 삭제)
@router.delete("/{rule_id}")
def delete_point_rule(rule_id: str, db: Session = Depends(get_db)):
    removed = point_service.delete_rule(db, rule_id)
    return {
        "success": True,
        "data": {"id": rule_id, "deleted_suggestions": removed},
        "message": "포인트 규칙이 삭제되었습니다"
    }

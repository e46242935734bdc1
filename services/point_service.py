"""
services/point_service.py

- 규칙 엔진과 DB(저장소) 사이의 연결 계층
- 학생 스냅샷 조립 → 엔진 평가 → 제안 저장 → 교사 승인(포인트 지급)/기각
- 포인트 규칙 CRUD (삭제 시 해당 규칙의 제안도 함께 삭제)
- 누적 포인트 순위표
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from models.classes import SchoolClass as ClassModel
from models.grades import GradeRecord as GradeModel
from models.point_rules import PointRule as RuleModel
from models.point_suggestions import PointSuggestion as SuggestionModel
from models.point_transactions import PointTransaction as TransactionModel
from models.students import Student as StudentModel
from schemas.classes import SchoolClass
from schemas.grades import GradeRecord
from schemas.point_rules import PointRule, PointRuleCreate, PointRuleUpdate
from schemas.point_suggestions import PointRuleSuggestion, RuleEvaluationContext
from schemas.point_transactions import PointTransaction
from schemas.students import LeaderboardEntry, Student
from services.errors import InvalidRuleError, NotFoundError, SuggestionAlreadyAppliedError
from services.point_rule_engine import PointRuleEngine

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


# ==========================================================
# [1단계] 조회 헬퍼
# ==========================================================

def get_student_model(db: Session, student_id: str) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if not student:
        logger.warning("Student not found: %s", student_id)
        raise NotFoundError(f"Student {student_id} not found")
    return student


def _get_rule_model(db: Session, rule_id: str) -> RuleModel:
    rule = db.query(RuleModel).filter(RuleModel.id == rule_id).first()
    if not rule:
        logger.warning("Point rule not found: %s", rule_id)
        raise NotFoundError(f"Point rule {rule_id} not found")
    return rule


def _get_suggestion_model(db: Session, suggestion_id: str) -> SuggestionModel:
    suggestion = db.query(SuggestionModel).filter(SuggestionModel.id == suggestion_id).first()
    if not suggestion:
        logger.warning("Point suggestion not found: %s", suggestion_id)
        raise NotFoundError(f"Point suggestion {suggestion_id} not found")
    return suggestion


def build_context(db: Session, student_id: str, teacher_id: str) -> RuleEvaluationContext:
    """학생 한 명의 활동 스냅샷 (출결, 성적, 포인트 내역, 전체 반 목록)"""
    student = get_student_model(db, student_id)
    grades = db.query(GradeModel).filter(GradeModel.student_id == student_id).all()
    transactions = db.query(TransactionModel).filter(TransactionModel.student_id == student_id).all()
    classes = db.query(ClassModel).all()

    return RuleEvaluationContext(
        student=Student.model_validate(student),
        grades=[GradeRecord.model_validate(g) for g in grades],
        point_transactions=[PointTransaction.model_validate(t) for t in transactions],
        classes=[SchoolClass.model_validate(c) for c in classes],
        teacher_id=teacher_id,
    )


# ==========================================================
# [2단계] 포인트 규칙 CRUD
# ==========================================================

def list_rules(db: Session, active_only: bool = False) -> List[PointRule]:
    query = db.query(RuleModel)
    if active_only:
        query = query.filter(RuleModel.is_active.is_(True))
    return [PointRule.model_validate(r) for r in query.order_by(RuleModel.created_at).all()]


def get_rule(db: Session, rule_id: str) -> PointRule:
    return PointRule.model_validate(_get_rule_model(db, rule_id))


def create_rule(db: Session, data: PointRuleCreate) -> PointRule:
    now = _now()
    rule = RuleModel(
        name=data.name,
        description=data.description,
        condition=data.condition.value,
        point_value=data.point_value,
        trigger=data.trigger.value,
        is_active=data.is_active,
        created_by=data.created_by,
        parameters=data.parameters.model_dump(exclude_none=True),
        created_at=now,
        updated_at=now,
    )
    db.add(rule)
    db.commit()
    db.refresh(rule)
    logger.info("Point rule created: %s (%s)", rule.id, rule.condition)
    return PointRule.model_validate(rule)


def update_rule(db: Session, rule_id: str, data: PointRuleUpdate) -> PointRule:
    rule = _get_rule_model(db, rule_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise InvalidRuleError(f"No changes given for point rule {rule_id}")

    for field, value in changes.items():
        if field == "parameters":
            value = data.parameters.model_dump(exclude_none=True)
        elif field in ("condition", "trigger"):
            value = value.value
        setattr(rule, field, value)

    rule.updated_at = _now()
    db.commit()
    db.refresh(rule)
    logger.info("Point rule updated: %s fields=%s", rule_id, sorted(changes))
    return PointRule.model_validate(rule)


def delete_rule(db: Session, rule_id: str) -> int:
    """규칙 삭제 + 관련 제안 삭제. 함께 지운 제안 수를 반환"""
    rule = _get_rule_model(db, rule_id)
    removed = (
        db.query(SuggestionModel)
        .filter(SuggestionModel.rule_id == rule_id)
        .delete(synchronize_session=False)
    )
    db.delete(rule)
    db.commit()
    logger.info("Point rule deleted: %s (with %d suggestions)", rule_id, removed)
    return removed


# ==========================================================
# [3단계] 제안 생성 / 조회
# ==========================================================

def generate_for_student(
    db: Session,
    student_id: str,
    teacher_id: str,
    now: Optional[datetime] = None,
    persist: bool = True,
) -> List[PointRuleSuggestion]:
    context = build_context(db, student_id, teacher_id)
    engine = PointRuleEngine(list_rules(db, active_only=True))
    suggestions = engine.generate_suggestions(context, now=now)

    if persist and suggestions:
        db.add_all(SuggestionModel(**s.model_dump()) for s in suggestions)
        db.commit()

    logger.info(
        "Generated %d suggestions for student %s (persist=%s)",
        len(suggestions), student_id, persist,
    )
    return suggestions


def list_suggestions(
    db: Session,
    student_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    pending_only: bool = False,
) -> List[PointRuleSuggestion]:
    query = db.query(SuggestionModel)
    if student_id:
        query = query.filter(SuggestionModel.student_id == student_id)
    if teacher_id:
        query = query.filter(SuggestionModel.teacher_id == teacher_id)
    if pending_only:
        query = query.filter(SuggestionModel.is_applied.is_(False))
    records = query.order_by(SuggestionModel.created_at).all()
    return [PointRuleSuggestion.model_validate(r) for r in records]


# ==========================================================
# [4단계] 포인트 지급 / 제안 승인·기각
# ==========================================================

def award_points(
    db: Session,
    student_id: str,
    points: int,
    reason: str,
    teacher_id: str,
    commit: bool = True,
) -> PointTransaction:
    """학생 누적 포인트 증감 + 거래 내역(오늘 날짜) 기록"""
    student = get_student_model(db, student_id)
    student.points = (student.points or 0) + points

    transaction = TransactionModel(
        student_id=student_id,
        teacher_id=teacher_id,
        points=points,
        reason=reason,
        date=_now().date().isoformat(),
    )
    db.add(transaction)
    if commit:
        db.commit()
        db.refresh(transaction)
    else:
        db.flush()

    logger.info("Awarded %d points to student %s by %s", points, student_id, teacher_id)
    return PointTransaction.model_validate(transaction)


def apply_suggestion(db: Session, suggestion_id: str) -> PointRuleSuggestion:
    suggestion = _get_suggestion_model(db, suggestion_id)
    if suggestion.is_applied:
        raise SuggestionAlreadyAppliedError(f"Point suggestion {suggestion_id} was already applied")

    # 지급과 상태 변경을 한 트랜잭션으로 커밋
    award_points(
        db,
        suggestion.student_id,
        suggestion.suggested_points,
        suggestion.reason,
        suggestion.teacher_id,
        commit=False,
    )
    suggestion.is_applied = True
    suggestion.applied_at = _iso(_now())
    db.commit()
    db.refresh(suggestion)

    logger.info("Point suggestion applied: %s", suggestion_id)
    return PointRuleSuggestion.model_validate(suggestion)


def dismiss_suggestion(db: Session, suggestion_id: str) -> None:
    suggestion = _get_suggestion_model(db, suggestion_id)
    db.delete(suggestion)
    db.commit()
    logger.info("Point suggestion dismissed: %s", suggestion_id)


# ==========================================================
# [5단계] 포인트 순위표
# ==========================================================

def leaderboard(db: Session, grade: Optional[int] = None) -> List[LeaderboardEntry]:
    """누적 포인트 내림차순 순위 (동점이면 이름순, 순위는 1부터 연속)"""
    query = db.query(StudentModel)
    if grade is not None:
        query = query.filter(StudentModel.grade == grade)
    students = query.order_by(StudentModel.points.desc(), StudentModel.name).all()
    return [
        LeaderboardEntry(rank=index, id=s.id, name=s.name, grade=s.grade, points=s.points or 0)
        for index, s in enumerate(students, start=1)
    ]

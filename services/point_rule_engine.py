"""
services/point_rule_engine.py

- 활성 포인트 규칙을 학생 한 명의 활동 스냅샷(출결, 성적, 포인트 내역, 반 목록)에 적용해
  포인트 지급 제안(PointRuleSuggestion)을 만든다.
- 상태 없음: 생성 후 규칙 목록은 읽기 전용이므로 학생별 병렬 호출 가능
- 기준 시각(now)은 호출 시 주입 가능 (미지정 시 UTC 현재 시각)
- 평가 함수는 예외를 던지지 않음: 데이터가 없으면 제안하지 않을 뿐
"""

import logging
import math
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence

from schemas.classes import SchoolClass
from schemas.grades import GradeRecord
from schemas.point_rules import PointRule, PointRuleCondition
from schemas.point_suggestions import PointRuleSuggestion, RuleEvaluationContext
from schemas.point_transactions import PointTransaction
from schemas.students import AttendanceStatus, Student
from services.liberian_grading import numeric_score

logger = logging.getLogger(__name__)

DEFAULT_DAYS_EARLY = 1
DEFAULT_MIN_SCORE = 85
DEFAULT_IMPROVEMENT_THRESHOLD = 10

PERFECT_WEEK_MIN_RECORDS = 5
BEHAVIOR_MIN_RECORDS = 3
BEHAVIOR_PRESENT_RATIO = 0.8
PARTICIPATION_MIN_GRADES = 2
PARTICIPATION_MIN_TRANSACTIONS = 1

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(days=7)
TWO_WEEKS = timedelta(days=14)


class RuleEvaluation(NamedTuple):
    should_suggest: bool
    reason: str


# ==========================================================
# [공통] 날짜/숫자 유틸
# ==========================================================

# 초 소수부 ("10:00:00.1") : 3.11 이전 fromisoformat 은 3자리/6자리만 받음
_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def _six_digit_fraction(match) -> str:
    return f"{match.group(1)}.{(match.group(2) + '000000')[:6]}"


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """
    ISO-8601 문자열 → UTC aware datetime
    - 날짜만 있거나 오프셋이 없으면 UTC로 간주
    - 초 소수부는 6자리로 맞춤 (1~9자리 모두 허용)
    - 해석할 수 없으면 None (모든 기간 필터에서 제외됨)
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(_six_digit_fraction, text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _fmt(value: float) -> str:
    # 정수면 소수점 없이 (85.0 → "85")
    return f"{value:g}"


def _since(values: Iterable, date_of: Callable, start: datetime) -> list:
    """date_of(item) 이 start 이후(포함)인 항목만"""
    result = []
    for item in values:
        when = parse_iso(date_of(item))
        if when is not None and when >= start:
            result.append(item)
    return result


def _is_enrolled_in_subject(student: Student, classes: Sequence[SchoolClass], subject_id: str) -> bool:
    return any(
        student.id in cls.student_ids and subject_id in cls.subject_ids
        for cls in classes
    )


def _subject_filter_passes(rule: PointRule, context: RuleEvaluationContext) -> bool:
    subject_id = rule.parameters.subject_id
    if not subject_id:
        return True
    return _is_enrolled_in_subject(context.student, context.classes, subject_id)


# ==========================================================
# [조건별 평가 함수]
# ==========================================================

def evaluate_attendance_perfect_week(rule: PointRule, context: RuleEvaluationContext, now: datetime) -> RuleEvaluation:
    recent = _since(context.student.attendance, lambda r: r.date, now - ONE_WEEK)
    all_present = all(r.status == AttendanceStatus.PRESENT for r in recent)

    if len(recent) >= PERFECT_WEEK_MIN_RECORDS and all_present:
        return RuleEvaluation(
            True,
            f"{context.student.name} has maintained perfect attendance "
            f"for the past week ({len(recent)} days)",
        )
    return RuleEvaluation(False, "Perfect attendance criteria not met")


def evaluate_assignment_submitted_early(rule: PointRule, context: RuleEvaluationContext, now: datetime) -> RuleEvaluation:
    days_early = rule.parameters.days_early or DEFAULT_DAYS_EARLY
    if not _subject_filter_passes(rule, context):
        return RuleEvaluation(False, "No early submissions found")

    one_day_ago = now - ONE_DAY
    for grade in context.grades:
        due = parse_iso(grade.due_date)
        submitted = parse_iso(grade.submission_date)
        if due is None or submitted is None:
            continue
        whole_days = math.floor((due - submitted).total_seconds() / ONE_DAY.total_seconds())
        if submitted >= one_day_ago and whole_days >= days_early:
            return RuleEvaluation(
                True,
                f'{context.student.name} submitted "{grade.assignment_name}" {days_early} days early',
            )
    return RuleEvaluation(False, "No early submissions found")


def evaluate_assignment_high_score(rule: PointRule, context: RuleEvaluationContext, now: datetime) -> RuleEvaluation:
    min_score = rule.parameters.min_score or DEFAULT_MIN_SCORE
    if not _subject_filter_passes(rule, context):
        return RuleEvaluation(False, "No high scores found")

    for grade in _since(context.grades, lambda g: g.date_assigned, now - ONE_DAY):
        if numeric_score(grade.score) >= min_score:
            return RuleEvaluation(
                True,
                f'{context.student.name} scored {grade.score} on "{grade.assignment_name}" '
                f"(above {_fmt(min_score)}% threshold)",
            )
    return RuleEvaluation(False, "No high scores found")


def evaluate_participation_active(rule: PointRule, context: RuleEvaluationContext, now: datetime) -> RuleEvaluation:
    # 참여도 데이터가 따로 없어 최근 성적 건수 + 포인트 내역 건수로 근사
    week_ago = now - ONE_WEEK
    recent_grades = _since(context.grades, lambda g: g.date_assigned, week_ago)
    recent_points = _since(context.point_transactions, lambda t: t.date, week_ago)

    if len(recent_grades) >= PARTICIPATION_MIN_GRADES and len(recent_points) >= PARTICIPATION_MIN_TRANSACTIONS:
        return RuleEvaluation(
            True,
            f"{context.student.name} has shown active participation with {len(recent_grades)} "
            f"recent assignments and {len(recent_points)} point transactions",
        )
    return RuleEvaluation(False, "Insufficient recent activity for participation assessment")


def evaluate_behavior_excellent(rule: PointRule, context: RuleEvaluationContext, now: datetime) -> RuleEvaluation:
    # 행동 기록이 따로 없어 출결 + 양(+)의 포인트 내역으로 근사
    week_ago = now - ONE_WEEK
    recent_attendance = _since(context.student.attendance, lambda r: r.date, week_ago)
    positive_points: List[PointTransaction] = [
        t for t in _since(context.point_transactions, lambda t: t.date, week_ago) if t.points > 0
    ]

    good_attendance = len(recent_attendance) >= BEHAVIOR_MIN_RECORDS and (
        sum(1 for r in recent_attendance if r.status == AttendanceStatus.PRESENT) / len(recent_attendance)
        >= BEHAVIOR_PRESENT_RATIO
    )

    if good_attendance and positive_points:
        return RuleEvaluation(
            True,
            f"{context.student.name} has demonstrated excellent behavior "
            f"with good attendance and positive point history",
        )
    return RuleEvaluation(False, "Behavior criteria not met")


def _mean_score(grades: Sequence[GradeRecord]) -> float:
    return sum(numeric_score(g.score) for g in grades) / len(grades)


def evaluate_improvement_significant(rule: PointRule, context: RuleEvaluationContext, now: datetime) -> RuleEvaluation:
    threshold = rule.parameters.improvement_threshold or DEFAULT_IMPROVEMENT_THRESHOLD
    week_ago = now - ONE_WEEK
    two_weeks_ago = now - TWO_WEEKS

    older, recent = [], []
    for grade in context.grades:
        when = parse_iso(grade.date_assigned)
        if when is None:
            continue
        if when >= week_ago:
            recent.append(grade)
        elif when >= two_weeks_ago:
            older.append(grade)

    # 신입생처럼 비교할 과거 기록이 없으면 판단하지 않음
    if not older or not recent:
        return RuleEvaluation(False, "Insufficient grade history for improvement assessment")

    older_mean = _mean_score(older)
    recent_mean = _mean_score(recent)
    improvement = recent_mean - older_mean

    if improvement >= threshold:
        return RuleEvaluation(
            True,
            f"{context.student.name} has improved by {improvement:.1f} points "
            f"(from {older_mean:.1f}% to {recent_mean:.1f}%)",
        )
    return RuleEvaluation(
        False,
        f"Improvement of {improvement:.1f} points is below threshold of {_fmt(threshold)}",
    )


Evaluator = Callable[[PointRule, RuleEvaluationContext, datetime], RuleEvaluation]

# 조건 → 평가 함수 (닫힌 집합, PointRuleCondition 전체를 덮어야 함)
EVALUATORS: Dict[PointRuleCondition, Evaluator] = {
    PointRuleCondition.ATTENDANCE_PERFECT_WEEK: evaluate_attendance_perfect_week,
    PointRuleCondition.ASSIGNMENT_SUBMITTED_EARLY: evaluate_assignment_submitted_early,
    PointRuleCondition.ASSIGNMENT_HIGH_SCORE: evaluate_assignment_high_score,
    PointRuleCondition.PARTICIPATION_ACTIVE: evaluate_participation_active,
    PointRuleCondition.BEHAVIOR_EXCELLENT: evaluate_behavior_excellent,
    PointRuleCondition.IMPROVEMENT_SIGNIFICANT: evaluate_improvement_significant,
}

if set(EVALUATORS) != set(PointRuleCondition):
    raise RuntimeError("EVALUATORS must cover every PointRuleCondition")


# ==========================================================
# [엔진]
# ==========================================================

def _suggestion_id(rule_id: str, student_id: str, now: datetime) -> str:
    millis = int(now.timestamp() * 1000)
    return f"suggestion_{rule_id}_{student_id}_{millis}_{uuid.uuid4().hex[:8]}"


class PointRuleEngine:
    """활성 규칙만 보관하고 학생별로 제안을 생성"""

    def __init__(self, rules: Iterable[PointRule]):
        self.rules: List[PointRule] = [rule for rule in rules if rule.is_active]

    def evaluate_rule(self, rule: PointRule, context: RuleEvaluationContext, now: datetime) -> RuleEvaluation:
        try:
            condition = PointRuleCondition(rule.condition)
        except ValueError:
            return RuleEvaluation(False, f"Unknown rule condition: {rule.condition}")
        return EVALUATORS[condition](rule, context, now)

    def generate_suggestions(
        self,
        context: RuleEvaluationContext,
        now: Optional[datetime] = None,
    ) -> List[PointRuleSuggestion]:
        now = _as_utc(now)
        created_at = now.isoformat().replace("+00:00", "Z")
        student = context.student
        suggestions = []

        for rule in self.rules:
            restriction = rule.parameters.grade_level_restriction
            if restriction and restriction != student.grade:
                continue

            evaluation = self.evaluate_rule(rule, context, now)
            logger.debug(
                "rule=%s student=%s suggest=%s reason=%s",
                rule.id, student.id, evaluation.should_suggest, evaluation.reason,
            )
            if not evaluation.should_suggest:
                continue

            suggestions.append(PointRuleSuggestion(
                id=_suggestion_id(rule.id, student.id, now),
                rule_id=rule.id,
                student_id=student.id,
                teacher_id=context.teacher_id,
                reason=evaluation.reason,
                suggested_points=rule.point_value,
                is_applied=False,
                created_at=created_at,
            ))

        return suggestions


def _as_utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def create_rule_engine(rules: Iterable[PointRule]) -> PointRuleEngine:
    return PointRuleEngine(rules)


def evaluate_rules_for_students(
    rules: Iterable[PointRule],
    students: Iterable[Student],
    grades: Sequence[GradeRecord],
    point_transactions: Sequence[PointTransaction],
    classes: Sequence[SchoolClass],
    teacher_id: str,
    now: Optional[datetime] = None,
) -> List[PointRuleSuggestion]:
    """여러 학생에 대해 학생별 스냅샷을 잘라 평가하고 제안을 이어 붙인다"""
    engine = create_rule_engine(rules)
    now = _as_utc(now)
    all_suggestions: List[PointRuleSuggestion] = []

    for student in students:
        context = RuleEvaluationContext(
            student=student,
            grades=[g for g in grades if g.student_id == student.id],
            point_transactions=[t for t in point_transactions if t.student_id == student.id],
            classes=list(classes),
            teacher_id=teacher_id,
        )
        all_suggestions.extend(engine.generate_suggestions(context, now=now))

    logger.info("Generated %d point suggestions for teacher %s", len(all_suggestions), teacher_id)
    return all_suggestions

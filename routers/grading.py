from fastapi import APIRouter

from schemas.grading import (
    AggregateRequest,
    ClassifyRequest,
    DivisionRequest,
    EligibilityRequest,
    FinalGradeRequest,
)
from services import liberian_grading

router = APIRouter(prefix="/grading", tags=["WAEC 성적 계산"])

# ==========================================================
# [1단계] 참조 데이터 (등급표, 학기)
# ==========================================================

# ✅ [READ] WAEC 등급표 전체
@router.get("/scale")
def get_grade_scale():
    return {
        "success": True,
        "data": [info.model_dump() for info in liberian_grading.LIBERIAN_GRADE_SCALE.values()],
        "message": "WAEC 등급표 조회 완료"
    }


# ✅ [READ] 학기 / 핵심 과목 / WAEC 과목 목록
@router.get("/terms")
def get_academic_terms():
    return {
        "success": True,
        "data": {
            "terms": [t.model_dump() for t in liberian_grading.LIBERIAN_ACADEMIC_TERMS],
            "core_subjects": list(liberian_grading.LIBERIAN_CORE_SUBJECTS),
            "waec_subjects": list(liberian_grading.WAEC_SUBJECTS),
        },
        "message": "학사 기준 정보 조회 완료"
    }


# ==========================================================
# [2단계] 계산 라우터 (DB 없음)
# ==========================================================

# ✅ 백분율 → 등급
@router.post("/classify")
def classify_percentage(body: ClassifyRequest):
    grade = liberian_grading.classify(body.percentage)
    return {
        "success": True,
        "data": {
            "percentage": body.percentage,
            "grade": grade.value,
            "grade_info": liberian_grading.grade_info(grade).model_dump(),
        },
        "message": f"{body.percentage}% → {grade.value}"
    }


# ✅ CA 30% + 외부 시험 70% 최종 성적
@router.post("/final-grade")
def calculate_final_grade(body: FinalGradeRequest):
    result = liberian_grading.final_grade(body.continuous_assessment, body.external_examination)
    return {"success": True, "data": result.model_dump(), "message": "최종 성적 계산 완료"}


# ✅ 대학 입학 자격
@router.post("/eligibility")
def check_university_eligibility(body: EligibilityRequest):
    result = liberian_grading.check_eligibility(body.subject_grades)
    return {
        "success": True,
        "data": result.model_dump(),
        "message": "입학 자격 충족" if result.is_eligible else "입학 자격 미충족"
    }


# ✅ best 6 합산 점수
@router.post("/aggregate")
def calculate_aggregate(body: AggregateRequest):
    return {
        "success": True,
        "data": {"aggregate_score": liberian_grading.aggregate_score(body.grades)},
        "message": "합산 점수 계산 완료"
    }


# ✅ 디비전 판정
@router.post("/division")
def classify_division(body: DivisionRequest):
    result = liberian_grading.classify_division(body.aggregate_score, body.has_english_and_math_credit)
    return {"success": True, "data": result.model_dump(), "message": result.division.value}


# ✅ 자격 + 합산 + 디비전 한 번에
@router.post("/summary")
def summarize(body: EligibilityRequest):
    summary = liberian_grading.summarize_results(body.subject_grades)
    return {"success": True, "data": summary.model_dump(), "message": "WAEC 결과 요약 완료"}

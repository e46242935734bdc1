from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from database.db import init_db

# ✅ 로그 레벨은 설정(LOG_LEVEL)에서
logging.basicConfig(level=settings.LOG_LEVEL)
# HTTP 라이브러리 디버그 로그 비활성화
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터 임포트
from routers import (
    classes, grades, gradesheet, grading,
    point_rules, point_suggestions, students,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 마이그레이션 도구 없이 시작 시 테이블 생성
    init_db()
    yield


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# ✅ CORS 설정 (프론트엔드 연동)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 등록 (일관된 JSON 에러 포맷)
add_error_handlers(app)

# ✅ /v1 프리픽스 라우터 등록
app.include_router(grading.router,           prefix="/v1")
app.include_router(point_rules.router,       prefix="/v1")
app.include_router(point_suggestions.router, prefix="/v1")
app.include_router(students.router,          prefix="/v1")
app.include_router(grades.router,            prefix="/v1")
app.include_router(classes.router,           prefix="/v1")
app.include_router(gradesheet.router,        prefix="/v1")

# ✅ 헬스체크 엔드포인트
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}

# ✅ 루트 엔드포인트
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - Liberian grading & point suggestions"}

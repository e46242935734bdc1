from sqlalchemy import create_engine               # SQLAlchemy 엔진 생성 도구
from sqlalchemy.orm import declarative_base        # 모델의 Base 클래스
from sqlalchemy.orm import sessionmaker            # 세션 팩토리 함수
from sqlalchemy.pool import StaticPool

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기

# ✅ SQLite는 스레드 체크 해제, 메모리 DB는 단일 커넥션 공유(StaticPool)
_engine_kwargs = {}
if settings.IS_SQLITE:
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
    if ":memory:" in settings.DATABASE_URL:
        _engine_kwargs["poolclass"] = StaticPool

# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

# ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


def init_db():
    """모든 모델 테이블 생성 (마이그레이션 도구 없이 앱 시작 시 호출)"""
    # 모델 등록용 import (Base.metadata에 테이블이 올라가도록)
    from models import (  # noqa: F401
        attendance, classes, grades, point_rules,
        point_suggestions, point_transactions, students,
    )

    Base.metadata.create_all(bind=engine)

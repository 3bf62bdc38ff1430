import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import get_database_url

logger = logging.getLogger(__name__)

Base = declarative_base()

# ✅ 프로세스 전체에서 하나의 엔진만 사용 (init 한 번, 이후 재사용)
_engine: Optional[Engine] = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def init_engine(database_url: Optional[str] = None) -> Engine:
    global _engine
    if _engine is not None:
        return _engine

    url = database_url or get_database_url()
    connect_args = {}
    if url.startswith("sqlite"):
        # SQLite는 스레드풀에서 같은 커넥션 공유 허용 필요
        connect_args["check_same_thread"] = False

    _engine = create_engine(url, connect_args=connect_args)
    SessionLocal.configure(bind=_engine)
    logger.info(f"✅ DB 엔진 생성: {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def dispose_engine() -> None:
    global _engine
    if _engine is None:
        return
    _engine.dispose()
    _engine = None
    logger.info("✅ DB 엔진 종료")


def create_tables() -> None:
    # 모델 등록 후 테이블 생성
    from app.models import image, user  # noqa: F401

    Base.metadata.create_all(bind=init_engine())


# DB 세션 가져오는 함수
def get_db():
    init_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

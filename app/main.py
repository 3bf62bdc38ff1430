import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import image
from app.core.config import get_host, get_log_level, get_port
from app.core.database import create_tables, dispose_engine
from app.core.exceptions import ImageActionError

# ✅ 로거 설정
logging.basicConfig(level=get_log_level())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ✅ DB 테이블 자동 생성 (엔진은 한 번만 생성 후 재사용)
    create_tables()
    yield
    # ✅ 프로세스 종료 시 커넥션 풀 정리
    dispose_engine()


# ✅ FastAPI 앱 생성
app = FastAPI(lifespan=lifespan)

# ✅ CORS 설정 (배포시 특정 도메인으로 제한 권장)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 개발 중 전체 허용, 배포 시 특정 도메인으로 제한
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Revalidate-Path", "Location"],
)


# ✅ 공통 에러 핸들러 (액션 에러 → 상태 코드 + 에러 종류)
@app.exception_handler(ImageActionError)
async def handle_image_action_error(request: Request, exc: ImageActionError):
    logger.error(f"❌ {request.method} {request.url.path} 실패 ({exc.kind}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "error": exc.kind})


# ✅ API 라우터 등록
app.include_router(image.router, prefix="/api")


# ✅ 루트 엔드포인트
@app.get("/")
def read_root():
    return {"message": "Hello FastAPI!"}


def run():
    import uvicorn

    uvicorn.run("app.main:app", host=get_host(), port=get_port())


if __name__ == "__main__":
    run()

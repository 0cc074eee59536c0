# taskapi/main.py
from dotenv import load_dotenv

# .env를 가장 먼저 로딩해야 이후 get_settings()가 값을 본다
load_dotenv()

import logging  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402

from fastapi import APIRouter, FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from taskapi.core.config import get_settings  # noqa: E402
from taskapi.core.errors import register_exception_handlers  # noqa: E402
from taskapi.core.logging_config import setup_logging  # noqa: E402
from taskapi.db.session import create_all_tables  # noqa: E402

# 모델 모듈 임포트(테이블 등록 보장용)
import taskapi.db.base  # noqa: F401,E402

# 라우터
from taskapi.routers import auth, health, task  # noqa: E402

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 로컬 sqlite 개발 환경에서만 테이블 자동 생성; 그 외에는 alembic upgrade head
    if settings.env == "dev" and settings.database_url.startswith("sqlite"):
        create_all_tables()
        logger.info("Created tables for local sqlite database")
    yield


app = FastAPI(
    title="Task Management API",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

api_router = APIRouter(prefix="/api")
api_router.include_router(health.router)
api_router.include_router(auth.auth_router)
api_router.include_router(task.router)
app.include_router(api_router)

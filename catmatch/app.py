"""FastAPI 앱 팩토리"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catmatch.core.config import settings
from catmatch.core.logging import logger
from catmatch.api import category_router, get_cache_coordinator, get_match_service, health_router
from catmatch.api.routes.category_routes import reset_services


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기"""
    logger.info("Starting application...")
    service = get_match_service(get_cache_coordinator())
    if settings.prefetch_on_startup:
        for marketplace in service.marketplaces:
            service.prefetch(marketplace)
    logger.info(f"Application started (marketplaces: {', '.join(service.marketplaces)})")
    yield
    logger.info("Shutting down application...")
    await service.close()
    reset_services()


def create_app() -> FastAPI:
    """
    FastAPI 앱 생성 (Factory Pattern)

    Returns:
        FastAPI 앱 인스턴스
    """
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 라우터 등록
    app.include_router(health_router)
    app.include_router(category_router)

    return app

# 앱 인스턴스 생성 (uvicorn이 로드할 수 있도록)
app = create_app()

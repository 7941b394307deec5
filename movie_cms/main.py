import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from movie_cms.database import MongoStore, create_store, get_mongo_store
from movie_cms.routers.admin_router import router as admin_router
from movie_cms.routers.movie_router import router as movie_router
from movie_cms.routers.site_setting_router import router as site_setting_router
from movie_cms.utils.config import settings
from movie_cms.utils.exception_handlers import register_exception_handlers
from movie_cms.utils.middleware.logger import LoggingMiddleware, setup_logging

logger = logging.getLogger(__name__)


def create_app(store: MongoStore = None) -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Movie CMS API")
    app.state.mongo = store or create_store()

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        await app.state.mongo.connect()

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.mongo.close()

    @app.get("/", tags=["Health"])
    async def root():
        return {"success": True, "message": "Backend API running"}

    @app.get("/health", tags=["Health"])
    async def health(store: MongoStore = Depends(get_mongo_store)):
        await store.ping()
        return {"success": True, "database": "ok"}

    app.include_router(admin_router)
    app.include_router(movie_router)
    app.include_router(site_setting_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    logger.info("Server starting on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run("movie_cms.main:app", host=settings.HOST, port=settings.PORT)

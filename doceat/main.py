from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from doceat.core.config import Settings, settings as default_settings
from doceat.core.logging import setup_logging
from doceat.services.pipeline_service import DocumentService, build_document_service

from doceat.api.routes_upload import router as upload_router
from doceat.api.routes_query import router as query_router

def create_app(settings: Settings | None = None, service: DocumentService | None = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.ENV)
    service = service or build_document_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await service.collections.store.close()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.document_service = service

    origins = [o.strip() for o in (settings.CORS_ORIGINS or "").split(",") if o.strip()]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
        )

    app.include_router(upload_router)
    app.include_router(query_router)

    @app.get("/health")
    async def health():
        checks = {"vector_db": await service.collections.store.healthy()}
        ok = all(checks.values())
        return {"ok": ok, "app": settings.APP_NAME, "env": settings.ENV, "deps": checks}

    return app


def run():
    import uvicorn

    uvicorn.run(create_app(), host=default_settings.SERVER_HOST, port=default_settings.SERVER_PORT)


if __name__ == "__main__":
    run()

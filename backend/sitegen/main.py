from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from sitegen.db import WebsiteStore
from sitegen.errors import NotFound
from sitegen.llm import CompletionClient
from sitegen.logger import get_logger
from sitegen.routes import router
from sitegen.utils import RegexEditApplicator

logger = get_logger(__name__)


def create_app(
    store: WebsiteStore | None = None,
    completion_client: CompletionClient | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Website generator API starting ({config.ENVIRONMENT})")
        yield
        logger.info("Website generator API stopped")

    app = FastAPI(title="Website Generator API", lifespan=lifespan)

    # The store lives as long as the process; nothing survives a restart
    app.state.store = store or WebsiteStore()
    app.state.completion_client = completion_client or CompletionClient()
    app.state.edit_applicator = RegexEditApplicator()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("sitegen.main:app", host="0.0.0.0", port=config.PORT)

# main.py
# FastAPI app entry point

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from product_media import config
from product_media.errors import RelayError, failure
from product_media.routes import router as api_router
from product_media.store import InMemoryJobStore, JobStore

logger = logging.getLogger(__name__)


def create_app(store: JobStore = None) -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Product Media API")
    app.state.results_store = store if store is not None else InMemoryJobStore()
    app.include_router(api_router)

    @app.exception_handler(RelayError)
    async def handle_relay_error(request: Request, exc: RelayError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(exc.to_dict(), status_code=exc.http_status)

    @app.exception_handler(RequestValidationError)
    async def handle_invalid_request(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        logger.warning("%s %s rejected: %s", request.method, request.url.path, problems)
        return JSONResponse(failure(f"Invalid request body: {problems}"), status_code=422)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(failure(str(exc) or "Internal server error"), status_code=500)

    @app.get("/")
    async def root():
        return {"message": "Welcome to the Product Media API"}

    return app


app = create_app()

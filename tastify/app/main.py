# tastify/app/main.py
from __future__ import annotations
import logging
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tastify import __version__
from tastify.app.config import settings
from tastify.app.domain.errors import RecordNotFoundError, StorageError, StorageNotConfiguredError
from tastify.app.routers.boards import router as boards_router
from tastify.app.routers.parse_recipe import router as parse_recipe_router
from tastify.app.routers.recipes import router as recipes_router
from tastify.app.routers.share import router as share_router

# Plain stdout logging, fine for dev and containers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
log = logging.getLogger("tastify")

app = FastAPI(title="Tastify Recipe API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(parse_recipe_router)
app.include_router(recipes_router)
app.include_router(boards_router)
app.include_router(share_router)


@app.exception_handler(RecordNotFoundError)
async def record_not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Not found", "message": str(exc)})


@app.exception_handler(StorageNotConfiguredError)
async def storage_not_configured_handler(request: Request, exc: StorageNotConfiguredError) -> JSONResponse:
    log.error("storage.not_configured missing=%s", ",".join(exc.missing))
    return JSONResponse(
        status_code=503,
        content={"error": "Storage unavailable", "message": "Storage is not configured"},
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    log.error("storage.fail path=%s operation=%s", request.url.path, exc.operation)
    return JSONResponse(
        status_code=502,
        content={"error": "Storage failure", "message": "Could not save or load your recipes. Please retry."},
    )


@app.get("/health")
def health():
    return {"ok": True, "env": settings.APP_ENV}

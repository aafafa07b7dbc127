from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from app.config import settings
from app.db.mongo import ensure_indexes, get_db
from app.auth.routes import router as auth_router
from app.api.routes.users import router as users_router
from app.api.routes.projects import router as projects_router
from app.api.routes.comments import router as comments_router


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="DevShowcase API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error handlers ------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"errors": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def _unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Server error"})


@app.on_event("startup")
def _startup() -> None:
    ensure_indexes()
    logger.info(f"DevShowcase API started (env={settings.app_env})")


@app.get("/health")
def health():
    get_db().command("ping")
    return {"mongo": "ok", "env": settings.app_env}


# Router registration -------------------------------------------------------
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(projects_router)
app.include_router(comments_router)

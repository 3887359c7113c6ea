# app/main.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Your configuration and DB
from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import AppError

from app.api.v1.routers import auth, habits, friends, users, profile

logger = logging.getLogger("uvicorn.error")

def _first_error_message(errors) -> str:
    """
    Message of the first failed validation rule.
    Custom validators raise ValueError, which pydantic prefixes with "Value error, ".
    """
    if not errors:
        return "Invalid request"
    message = str(errors[0].get("msg", "Invalid request"))
    return message.removeprefix("Value error, ")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": {"code": "VALIDATION_ERROR", "message": _first_error_message(exc.errors())}},
    )

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    # Details stay in the server log; clients get a generic message
    logger.exception("[api] %s %s failed", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
    )

@app.on_event("startup")
async def on_startup():
    await init_db()
    logger.info("[startup] %s ready (env=%s, timezone=%s)", settings.APP_NAME, settings.env, settings.TIMEZONE)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(habits.router, prefix="/api/v1")
app.include_router(friends.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(profile.router, prefix="/api/v1")

@app.get("/healthz")
def healthz():
    return {"ok": True}

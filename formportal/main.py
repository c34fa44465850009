from __future__ import annotations

import time
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from formportal.core.config import settings
from formportal.utils.api import fail

# Import models to populate SQLAlchemy metadata
import formportal.db.models  # noqa: F401

from formportal.auth.router import router as auth_router
from formportal.modules.banks.router import router as banks_router
from formportal.modules.sections.router import router as sections_router
from formportal.modules.questions.router import router as questions_router
from formportal.modules.responses.router import router as responses_router
from formportal.modules.stats.router import router as stats_router
from formportal.modules.users.router import router as users_router


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("formportal")


app = FastAPI(title=settings.APP_NAME)

# CORS (Access-Control-Allow-*) - configurable
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
)

app.add_middleware(GZipMiddleware, minimum_size=800)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start = time.perf_counter()
    resp = await call_next(request)
    resp.headers["X-Process-Time-ms"] = f"{(time.perf_counter() - start) * 1000:.2f}"
    return resp


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    resp = await call_next(request)
    resp.headers["X-Content-Type-Options"] = "nosniff"
    resp.headers["X-Frame-Options"] = "DENY"
    resp.headers["Referrer-Policy"] = "same-origin"
    return resp


@app.exception_handler(HTTPException)
async def http_exc_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content=fail(str(exc.detail)), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exc_handler(request: Request, exc: RequestValidationError):
    fields = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        if loc:
            fields.append(".".join(loc))
    msg = "Missing or invalid fields"
    if fields:
        msg = f"{msg}: {', '.join(sorted(set(fields)))}"
    return JSONResponse(status_code=400, content=fail(msg))


@app.exception_handler(SQLAlchemyError)
async def db_exc_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=fail("Server error"))


@app.exception_handler(Exception)
async def unhandled_exc_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception", exc_info=exc)
    return JSONResponse(status_code=500, content=fail("Server error"))


# Routers
app.include_router(auth_router)
app.include_router(banks_router)
app.include_router(sections_router)
app.include_router(questions_router)
app.include_router(responses_router)
app.include_router(stats_router)
app.include_router(users_router)


@app.get("/health", response_class=JSONResponse)
def health():
    return {"status": "ok", "app": settings.APP_NAME}


def run() -> None:
    import uvicorn

    uvicorn.run(
        "formportal.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENV == "dev",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()

import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from jobboard.core import config
from jobboard.core.errors import error_body, register_exception_handlers
from jobboard.core.logging_config import sanitize_log_data, setup_logging
from jobboard.db.init_db import init_db
from jobboard.services.mail_service import build_mail_gateway

from jobboard.api.routes import admins, auth, categories, companies, health, jobs, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL)
    logger.info(f"Starting Job Board API (environment={config.ENVIRONMENT})")

    init_db()

    mailer = build_mail_gateway()
    mailer.open()
    app.state.mailer = mailer

    yield

    mailer.close()
    logger.info("Job Board API stopped")


# ============================================
# FASTAPI APP INIT
# ============================================

app = FastAPI(title="Job Board API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "token"],
)

register_exception_handlers(app)


@app.middleware("http")
async def enforce_timeout(request: Request, call_next):
    try:
        return await asyncio.wait_for(call_next(request), timeout=config.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error(f"Request timed out after {config.REQUEST_TIMEOUT_SECONDS}s: {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            content=error_body("Request timed out"),
        )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    logger.debug(f"Request headers: {sanitize_log_data(dict(request.headers))}")

    response = await call_next(request)

    elapsed_ms = (time.time() - start_time) * 1000
    response.headers["X-Process-Time"] = f"{elapsed_ms:.1f}ms"
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


# ============================================
# REGISTER ALL ROUTERS
# ============================================

app.include_router(users.router)
app.include_router(companies.router)
app.include_router(admins.router)
app.include_router(auth.router)
app.include_router(categories.router)
app.include_router(jobs.router)
app.include_router(health.router)

app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
def root():
    return {"status": "Job Board API running"}

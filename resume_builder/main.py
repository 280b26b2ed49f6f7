import logging
from pathlib import Path

import sentry_sdk
import socketio
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from resume_builder.api.analyzer import router as analyzer_router
from resume_builder.api.ats import router as ats_router
from resume_builder.api.auth import router as auth_router
from resume_builder.api.comments import router as comments_router
from resume_builder.api.health import router as health_router
from resume_builder.api.jobs import router as jobs_router
from resume_builder.api.latex import router as latex_router
from resume_builder.api.resumes import router as resumes_router
from resume_builder.api.templates import router as templates_router
from resume_builder.api.users import router as users_router
from resume_builder.api.versions import router as versions_router
from resume_builder.core.config import settings
from resume_builder.core.cors import cors_allowed_origins
from resume_builder.core.lifespan import lifespan
from resume_builder.core.rate_limit import limiter
from resume_builder.realtime import sio

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger(__name__)

app = FastAPI(title="Resume Builder API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error path=%s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


upload_dir = Path(settings.upload_dir)
upload_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(users_router, prefix="/api", tags=["Users"])
app.include_router(resumes_router, prefix="/api", tags=["Resumes"])
app.include_router(versions_router, prefix="/api", tags=["Versions"])
app.include_router(comments_router, prefix="/api", tags=["Comments"])
app.include_router(templates_router, prefix="/api", tags=["Templates"])
app.include_router(analyzer_router, prefix="/api", tags=["Analyzer"])
app.include_router(ats_router, prefix="/api", tags=["ATS"])
app.include_router(jobs_router, prefix="/api", tags=["Jobs"])
app.include_router(latex_router, prefix="/api", tags=["LaTeX"])

asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)

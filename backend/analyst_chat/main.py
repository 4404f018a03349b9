import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from analyst_chat.core.config import settings
from analyst_chat.core.database import init_db
from analyst_chat.core.errors import AppError
from analyst_chat.api import auth, chat, context, history, student_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure logging based on debug setting
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s" if settings.debug
        else "%(levelname)-8s %(name)s: %(message)s",
    )

    init_db()
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if not exc.expose_detail:
        logger.error(f"{request.method} {request.url.path} failed ({type(exc).__name__}): {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"{request.method} {request.url.path} rejected: {exc.errors()}")
    # Chat clients only read the reply field
    if request.url.path.startswith("/api/chat"):
        return JSONResponse(status_code=400, content={"reply": "⚠️ Invalid request."})
    return JSONResponse(status_code=400, content={"success": False, "message": "Invalid request body"})


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
app.include_router(history.router, prefix="/api/history", tags=["history"])
app.include_router(student_data.router, prefix="/api/student-data", tags=["student-data"])
if settings.debug:
    app.include_router(context.router, prefix="/api/context", tags=["context"])


@app.get("/api/health")
async def health():
    return {"status": "ok", "app": settings.app_name}

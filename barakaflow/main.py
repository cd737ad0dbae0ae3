import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from barakaflow.config import settings
from barakaflow.database import init_models
from barakaflow.logging_setup import setup_logging
from barakaflow.routers.assistant import assistant_error_handler, router as assistant_router
from barakaflow.routers.auth import router as auth_router
from barakaflow.routers.tasks import router as tasks_router
from barakaflow.services.assistant_errors import AssistantError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.ERROR_LOG_FILE)
    if settings.AUTO_CREATE_TABLES:
        await init_models()
        logger.info("Database tables ready")
    yield


app = FastAPI(
    lifespan=lifespan,
    title="BarakaFlow API",
    description="Tasks, recurring schedules and an AI planning assistant",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AssistantError, assistant_error_handler)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

# Static task routes (/tasks/board, /tasks/for-date) are declared before /tasks/{task_id}
app.include_router(auth_router)
app.include_router(tasks_router)
app.include_router(assistant_router)

@app.get("/")
def root():
    return {"message": "BarakaFlow API running"}

@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("barakaflow.main:app", host="0.0.0.0", port=8000, reload=True)

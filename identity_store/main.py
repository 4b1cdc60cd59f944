from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from identity_store.api.v1.routes import api_router
from identity_store.core.config import settings
from identity_store.core.exceptions import ConstraintViolation, NotFound
from identity_store.core.logging import configure_logging
from identity_store.db import migrate
from identity_store.db.session import engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if settings.AUTO_MIGRATE:
        migrate.upgrade(engine)
    yield


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    logger.info("{} {} -> {}", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(ConstraintViolation)
async def constraint_violation_handler(request: Request, exc: ConstraintViolation):
    logger.warning("{} {} -> {}", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "constraint": exc.constraint},
    )


@app.get("/")
def root():
    return {"msg": f"{settings.PROJECT_NAME} running"}

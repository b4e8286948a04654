from dotenv import load_dotenv, find_dotenv
load_dotenv(find_dotenv())  # load .env before settings are read

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from gitdash.core.config import settings
from gitdash.core.database import init_models
from gitdash.core.errors import GitdashError, gitdash_error_handler, request_validation_handler
from gitdash.routers import health, shares, shared, profile, dashboard

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    yield


app = FastAPI(title="gitdash API", lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(GitdashError, gitdash_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.include_router(health.router)
app.include_router(shares.router, prefix="", tags=["shares"])
app.include_router(shared.router, prefix="", tags=["shared"])
app.include_router(profile.router, prefix="", tags=["profile"])
app.include_router(dashboard.router, prefix="", tags=["dashboard"])

# uvicorn main:app --reload --port 8080

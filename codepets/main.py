"""
CodePets - Main Application
Learner profiles, course progress and code validation backed by MongoDB
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from codepets.auth.firebase_auth import init_firebase
from codepets.compiler.router import router as compiler_router
from codepets.config import settings
from codepets.courses.catalog import catalog
from codepets.courses.router import router as courses_router
from codepets.database import create_indexes, manager
from codepets.logging_config import setup_logging
from codepets.profiles.database import ProfileConflictError
from codepets.profiles.router import router as profile_router

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="CodePets API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    init_firebase()
    await manager.connect()
    await create_indexes(manager.db)
    await catalog.get_courses(manager.db)
    logger.info("CodePets API started")


@app.on_event("shutdown")
async def shutdown_event():
    await manager.disconnect()


# ==================== ERROR HANDLERS ====================

@app.exception_handler(ProfileConflictError)
async def profile_conflict_handler(request: Request, exc: ProfileConflictError):
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=409,
        content={"detail": "Profile was updated by another request, please retry"}
    )


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


# ==================== ROUTER REGISTRATION ====================
app.include_router(profile_router)
app.include_router(courses_router)
app.include_router(compiler_router)


@app.get("/health")
async def health():
    database_ok = await manager.ping()
    return {
        "status": "ok" if database_ok else "degraded",
        "database": "connected" if database_ok else "unavailable",
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

"""
Standalone compile-and-run service
Run with: uvicorn codepets.compiler.app:app --port 3000
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codepets.compiler.router import router as compiler_router
from codepets.config import settings
from codepets.logging_config import setup_logging

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title="CodePets Compiler")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(compiler_router)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 3000))
    uvicorn.run(app, host="0.0.0.0", port=port)

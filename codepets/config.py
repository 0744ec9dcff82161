"""
CodePets Configuration
Environment-driven settings for database, Firebase, catalog cache and compiler
"""

import os
from typing import List, Optional


class Config:
    """Validated configuration - read once at startup"""

    def __init__(self):
        self.MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
        self.MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "codepets")

        self.FIREBASE_PROJECT_ID: Optional[str] = os.getenv("FIREBASE_PROJECT_ID")
        private_key = os.getenv("FIREBASE_PRIVATE_KEY")
        self.FIREBASE_PRIVATE_KEY = private_key.replace('\\n', '\n') if private_key else None
        self.FIREBASE_CLIENT_EMAIL = os.getenv("FIREBASE_CLIENT_EMAIL")

        self.CATALOG_TTL_SECONDS = self._int_env("CATALOG_TTL_SECONDS", 3600)
        self.CORS_ORIGINS = self._parse_list(os.getenv("CORS_ORIGINS", "*"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Compile-and-run
        self.JAVAC_BIN = os.getenv("JAVAC_BIN", "javac")
        self.JAVA_BIN = os.getenv("JAVA_BIN", "java")
        self.COMPILER_TIMEOUT_SECONDS = self._int_env("COMPILER_TIMEOUT_SECONDS", 10)
        self.COMPILER_MAX_OUTPUT_BYTES = self._int_env("COMPILER_MAX_OUTPUT_BYTES", 64 * 1024)
        self.COMPILER_MAX_CONCURRENCY = self._int_env("COMPILER_MAX_CONCURRENCY", 4)

    @property
    def has_service_account(self) -> bool:
        return bool(self.FIREBASE_PRIVATE_KEY and self.FIREBASE_CLIENT_EMAIL)

    @staticmethod
    def require_env(key: str) -> str:
        """Get required environment variable or crash"""
        value = os.getenv(key)
        if not value:
            raise RuntimeError(f"FATAL: Missing required environment variable: {key}")
        return value

    @staticmethod
    def _int_env(key: str, default: int) -> int:
        raw = os.getenv(key)
        if raw is None or raw == "":
            return default
        try:
            return int(raw)
        except ValueError:
            raise RuntimeError(f"FATAL: {key} must be an integer, got {raw!r}")

    @staticmethod
    def _parse_list(value: str) -> List[str]:
        """Parse comma-separated values into a list"""
        return [item.strip() for item in value.split(",") if item.strip()]


settings = Config()

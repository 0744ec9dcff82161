"""
Firebase Authentication for learner requests
Verifies Firebase ID tokens from the Authorization header and yields the caller identity
"""

import logging
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from fastapi import HTTPException, Header
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from codepets.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Verified caller identity"""
    uid: str
    email: Optional[str] = None


def init_firebase() -> None:
    """
    Initialize Firebase Admin SDK at app startup

    Uses an explicit service account when FIREBASE_PRIVATE_KEY and
    FIREBASE_CLIENT_EMAIL are set, application default credentials otherwise.

    Raises:
        RuntimeError: If configuration invalid or Firebase init fails
    """
    project_id = settings.require_env("FIREBASE_PROJECT_ID")

    if firebase_admin._apps:
        return

    try:
        if settings.has_service_account:
            cred = credentials.Certificate({
                "type": "service_account",
                "project_id": project_id,
                "private_key": settings.FIREBASE_PRIVATE_KEY,
                "client_email": settings.FIREBASE_CLIENT_EMAIL,
                "token_uri": "https://oauth2.googleapis.com/token",
            })
        else:
            cred = credentials.ApplicationDefault()
        firebase_admin.initialize_app(cred, {"projectId": project_id})
    except Exception as e:
        raise RuntimeError(f"FATAL: Firebase initialization failed: {e}") from e

    logger.info("Firebase Admin SDK initialized for project %s", project_id)


def verify_firebase_token(firebase_token: str) -> Identity:
    """
    Verify Firebase ID token

    Args:
        firebase_token: Firebase ID token from the client

    Returns:
        Identity: uid and email from the decoded token

    Raises:
        HTTPException: 401 if the token is invalid, expired or revoked
    """
    try:
        decoded_token = auth.verify_id_token(firebase_token)
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError):
        raise HTTPException(status_code=401, detail="Unauthorized")
    except (ValueError, FirebaseError) as e:
        logger.warning("Token verification failed: %s", e)
        raise HTTPException(status_code=401, detail="Unauthorized")

    uid = decoded_token.get("uid") or decoded_token.get("sub")
    if not uid:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return Identity(uid=uid, email=decoded_token.get("email"))


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Extract token from "Bearer <token>" or fail with 401"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return token


def get_current_identity(authorization: str = Header(None)) -> Identity:
    """
    FastAPI dependency to protect learner routes

    Usage:
        @router.get("/profile")
        async def profile(identity: Identity = Depends(get_current_identity)):
            ...
    """
    token = extract_bearer_token(authorization)
    return verify_firebase_token(token)

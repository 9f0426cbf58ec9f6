"""
FastAPI dependencies.

Authentication of the caller and construction of the trip directory and
request ledger over the request's database session.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.core.config import settings
from backend.app.core.jwt import decode_access_token
from backend.app.core.token_revocation import is_token_revoked
from backend.app.db.session import get_db
from backend.app.domain.rides.request_ledger import RequestLedger
from backend.app.domain.rides.trip_directory import TripDirectory
from backend.app.models.user import User
from backend.app.storage.sqlalchemy_store import SqlAlchemyTripStore, SqlAlchemyTripRequestStore

# HTTP Bearer security scheme
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    1. Validates JWT token signature and expiry
    2. Checks if token has been revoked (logout)
    3. Verifies user still exists and is active

    Returns:
        Decoded token payload containing user_id, plus the raw token

    Raises:
        HTTPException: 401 if authentication fails, 403 if user is inactive
    """
    token = credentials.credentials

    payload = decode_access_token(token)
    if payload is None or not payload.get("user_id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if await is_token_revoked(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has been revoked",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await db.execute(select(User).where(User.id == payload["user_id"]))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    return {**payload, "token": token}


def get_trip_directory(db: AsyncSession = Depends(get_db)) -> TripDirectory:
    return TripDirectory(SqlAlchemyTripStore(db))


def get_request_ledger(
    db: AsyncSession = Depends(get_db),
    directory: TripDirectory = Depends(get_trip_directory),
) -> RequestLedger:
    return RequestLedger(
        directory,
        SqlAlchemyTripRequestStore(db),
        reject_duplicates=settings.reject_duplicate_requests,
    )

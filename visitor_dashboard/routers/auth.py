import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from visitor_dashboard.core.database import get_db
from visitor_dashboard.core.rate_limiter import limiter, login_rate_limit
from visitor_dashboard.core.security import create_access_token, get_current_admin, verify_password
from visitor_dashboard.models.admin import AdminUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    token: str


class AdminInfoResponse(BaseModel):
    id: UUID
    username: str


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

@router.post("/login", response_model=LoginResponse)
@limiter.limit(login_rate_limit)
async def login(request: Request, body: LoginRequest, db: AsyncSession = Depends(get_db)) -> LoginResponse:
    """Exchange admin credentials for a bearer token."""
    if not body.username or not body.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username and password required.")

    result = await db.execute(select(AdminUser).where(AdminUser.username == body.username))
    admin = result.scalar_one_or_none()

    # Same response for unknown user and wrong password
    if admin is None or not admin.is_active or not verify_password(body.password, admin.hashed_password):
        logger.warning("Failed login for username %r", body.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials.")

    logger.info("Admin %r logged in", admin.username)
    return LoginResponse(token=create_access_token(admin.id, admin.username))


# ---------------------------------------------------------------------------
# Current Admin
# ---------------------------------------------------------------------------

@router.get("/me", response_model=AdminInfoResponse)
async def get_me(admin: AdminUser = Depends(get_current_admin)) -> AdminInfoResponse:
    """Return info about the currently authenticated admin."""
    return AdminInfoResponse(id=admin.id, username=admin.username)

"""Authentication endpoints — registration, login, logout, current user."""

from datetime import datetime

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, EmailStr

from app.api.deps import Auth, OptionalAuth, Service
from app.models import Role, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────────

class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str
    display_name: str
    # Only honoured when the caller is a logged-in admin
    roles: list[str] | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    issued_at: datetime
    roles: list[Role]
    user: UserRead


class MeResponse(BaseModel):
    user: UserRead
    session_roles: list[Role]


# ── Routes ───────────────────────────────────────────────────

@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, auth: OptionalAuth, service: Service) -> UserRead:
    """Create an account. Anonymous sign-ups always start as ASHRAM_USER."""
    user = await service.sign_up(
        email=body.email,
        password=body.password,
        display_name=body.display_name,
        roles=body.roles,
        requested_by=auth.user_id if auth else None,
    )
    return UserRead.model_validate(user)


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, service: Service) -> LoginResponse:
    """Authenticate with email + password, receive a session token."""
    session = await service.login(email=body.email, password=body.password)
    user = await service.get_user(session.user_id)
    return LoginResponse(
        access_token=session.token,
        issued_at=session.issued_at,
        roles=session.roles,
        user=UserRead.model_validate(user),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(auth: Auth, service: Service) -> None:
    await service.logout(auth.token)


@router.get("/me", response_model=MeResponse)
async def get_me(auth: Auth, service: Service) -> MeResponse:
    """Return the current user and the roles captured at login."""
    user = await service.get_user(auth.user_id)
    return MeResponse(user=UserRead.model_validate(user), session_roles=auth.roles)

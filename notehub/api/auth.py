"""Authentication endpoints — login, registration, invites, current user."""

from fastapi import APIRouter, status

from notehub.api.deps import Admin, AppSettings, Auth, Session
from notehub.core.errors import NotFoundError, ValidationError
from notehub.core.security import create_jwt
from notehub.models.base import ApiSchema
from notehub.models.tenant import Tenant, TenantRead
from notehub.models.user import User, UserRole
from notehub.services.accounts import invite_user, register_user
from notehub.services.credentials import authenticate

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────────

class LoginRequest(ApiSchema):
    email: str | None = None
    password: str | None = None


class AccountRead(ApiSchema):
    id: int
    email: str
    role: UserRole
    tenant: TenantRead


class LoginResponse(ApiSchema):
    token: str
    user: AccountRead


class RegisterRequest(ApiSchema):
    email: str | None = None
    password: str | None = None
    role: str | None = None
    tenant_slug: str | None = None


class RegisterResponse(ApiSchema):
    message: str
    user_id: int


class InviteRequest(ApiSchema):
    email: str | None = None
    role: str | None = None


class InviteResponse(ApiSchema):
    message: str
    user_id: int
    temp_password: str


def _account(user: User, tenant: Tenant) -> AccountRead:
    return AccountRead(
        id=user.id,
        email=user.email,
        role=user.role,
        tenant=TenantRead.model_validate(tenant),
    )


# ── Routes ───────────────────────────────────────────────────

@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, session: Session, settings: AppSettings) -> LoginResponse:
    """Authenticate with email + password, receive a JWT."""
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")

    user, tenant = await authenticate(session, body.email, body.password)

    token = create_jwt(
        user_id=user.id,
        email=user.email,
        role=str(user.role),
        tenant_id=tenant.id,
        tenant_slug=tenant.slug,
        settings=settings,
    )
    return LoginResponse(token=token, user=_account(user, tenant))


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(body: RegisterRequest, session: Session) -> RegisterResponse:
    """Create a user in an existing tenant, addressed by slug."""
    user = await register_user(
        session,
        email=body.email,
        password=body.password,
        role=body.role,
        tenant_slug=body.tenant_slug,
    )
    return RegisterResponse(message="User created successfully", user_id=user.id)


@router.post(
    "/invite",
    response_model=InviteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def invite(body: InviteRequest, auth: Admin, session: Session) -> InviteResponse:
    """Create a user in the admin's tenant with a one-time password.

    The temporary password is returned once — pass it on to the invitee.
    """
    user, temp_password = await invite_user(
        session, tenant_id=auth.tenant_id, email=body.email, role=body.role
    )
    return InviteResponse(
        message="User invited successfully",
        user_id=user.id,
        temp_password=temp_password,
    )


@router.get("/me", response_model=AccountRead)
async def get_me(auth: Auth, session: Session) -> AccountRead:
    """Return the current authenticated user and their tenant."""
    user = await session.get(User, auth.user_id)
    tenant = await session.get(Tenant, auth.tenant_id)
    if user is None or tenant is None:
        raise NotFoundError("User not found")
    return _account(user, tenant)

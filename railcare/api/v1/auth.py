"""Login/signup routes and auth dependencies (get_current_user, require_roles, station scoping)."""

from collections.abc import Callable
from typing import Annotated, Any

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Query, Session

from railcare.core.config import settings
from railcare.core.database import get_db
from railcare.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from railcare.models import User
from railcare.schemas.auth import CurrentUser, LoginRequest, SignupRequest, TokenResponse
from railcare.schemas.common import PUBLIC, SUPER_ADMIN
from railcare.schemas.user import UserOut

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with e-mail and password; returns a JWT access token and sets it
    as the session cookie. API clients may send it as: Authorization: Bearer <token>
    """
    user = db.query(User).filter(User.email == body.email.lower()).first()
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )
    token = create_access_token(sub=user.id, role=user.role, station_id=user.station_id)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.APP_ENV == "prod",
    )
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        user=UserOut.model_validate(user),
    )


@router.post("/logout", status_code=204)
def logout(response: Response) -> Response:
    """Clear the session cookie. Bearer tokens stay valid until they expire."""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    response.status_code = 204
    return response


@router.post("/signup", response_model=UserOut, status_code=201)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Self-service registration. Creates a Public account; other roles are granted via /users."""
    email = body.email.lower()
    if db.query(User).filter(User.email == email).first() is not None:
        raise HTTPException(status_code=400, detail="User with this email already exists")
    user = User(
        name=body.name.strip(),
        email=email,
        password_hash=hash_password(body.password),
        role=PUBLIC,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: require a valid JWT from the Bearer header or the session cookie
    and return the current user. Raises 401 if missing or invalid, 403 if disabled.
    """
    token = credentials.credentials if credentials is not None else None
    if not token:
        token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )
    return CurrentUser.model_validate(user)


def require_roles(*roles: str) -> Callable[..., CurrentUser]:
    """Dependency factory: authenticated user whose role is one of roles, else 403."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden - requires role: {', '.join(roles)}",
            )
        return current_user

    return dependency


def scope_station_id(user: CurrentUser, requested: int | None) -> int | None:
    """
    Station filter to apply for this caller. SuperAdmin gets what was requested
    (None = all stations); everyone else is pinned to their own station.
    """
    if user.role == SUPER_ADMIN:
        return requested
    return user.station_id


def scope_query(query: Query, column: Any, user: CurrentUser, requested: int | None) -> Query:
    """
    Apply the station filter for this caller to query. A non-SuperAdmin without a
    station is filtered on NULL, so column must be non-nullable (otherwise use
    require_station first).
    """
    if user.role == SUPER_ADMIN:
        return query.filter(column == requested) if requested is not None else query
    return query.filter(column == user.station_id)


def require_station(user: CurrentUser, requested: int | None) -> int | None:
    """Like scope_station_id, but 400 when a non-SuperAdmin has no station to report on."""
    station_id = scope_station_id(user, requested)
    if user.role != SUPER_ADMIN and station_id is None:
        raise HTTPException(status_code=400, detail="User is not assigned to a station")
    return station_id


def ensure_station_access(user: CurrentUser, station_id: int) -> None:
    """Raise 403 unless the caller is SuperAdmin or belongs to station_id."""
    if user.role != SUPER_ADMIN and user.station_id != station_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden - resource belongs to another station",
        )


@router.get("/me", response_model=CurrentUser)
def read_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    return current_user

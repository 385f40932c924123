"""User administration (SuperAdmin only)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from railcare.api.v1.auth import require_roles
from railcare.core.database import get_db
from railcare.core.security import hash_password
from railcare.models import Station, User
from railcare.schemas.auth import CurrentUser
from railcare.schemas.common import STATION_BOUND_ROLES, SUPER_ADMIN
from railcare.schemas.station import MessageResponse
from railcare.schemas.user import UserCreate, UserOut, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

SuperAdmin = Annotated[CurrentUser, Depends(require_roles(SUPER_ADMIN))]


def _load_user(db: Session, user_id: int) -> User:
    user = (
        db.query(User)
        .options(joinedload(User.station))
        .filter(User.id == user_id)
        .first()
    )
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _check_station(db: Session, station_id: int | None) -> None:
    if station_id is not None and db.get(Station, station_id) is None:
        raise HTTPException(status_code=400, detail="Station not found")


def _check_email_free(db: Session, email: str, exclude_id: int | None = None) -> None:
    query = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first() is not None:
        raise HTTPException(status_code=400, detail="User with this email already exists")


@router.get("", response_model=list[UserOut])
def list_users(db: Annotated[Session, Depends(get_db)], _admin: SuperAdmin) -> list[User]:
    return (
        db.query(User)
        .options(joinedload(User.station))
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )


@router.post("", response_model=UserOut, status_code=201)
def create_user(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    _admin: SuperAdmin,
) -> User:
    email = body.email.lower()
    _check_email_free(db, email)
    _check_station(db, body.station_id)
    user = User(
        name=body.name.strip(),
        email=email,
        password_hash=hash_password(body.password),
        role=body.role,
        station_id=body.station_id,
    )
    db.add(user)
    db.commit()
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return _load_user(db, user.id)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int, db: Annotated[Session, Depends(get_db)], _admin: SuperAdmin
) -> User:
    return _load_user(db, user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    body: UserUpdate,
    db: Annotated[Session, Depends(get_db)],
    _admin: SuperAdmin,
) -> User:
    """
    Partial update. Sending station_id: null detaches the user from its station;
    omitting it leaves the station unchanged.
    """
    user = _load_user(db, user_id)
    if body.email is not None:
        email = body.email.lower()
        if email != user.email:
            _check_email_free(db, email, exclude_id=user.id)
        user.email = email
    if body.name is not None:
        user.name = body.name.strip()
    if body.password is not None:
        user.password_hash = hash_password(body.password)
    if body.role is not None:
        user.role = body.role
    if body.is_active is not None:
        user.is_active = body.is_active
    if "station_id" in body.model_fields_set:
        _check_station(db, body.station_id)
        user.station_id = body.station_id
    if user.role in STATION_BOUND_ROLES and user.station_id is None:
        raise HTTPException(
            status_code=400, detail=f"station_id is required for role {user.role}"
        )
    db.commit()
    return _load_user(db, user_id)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    admin: SuperAdmin,
) -> MessageResponse:
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")
    user = _load_user(db, user_id)
    db.delete(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(
            status_code=409,
            detail="User has reported issues, inspections or report snapshots; deactivate the account instead",
        ) from e
    logger.info("User deleted", extra={"user_id": user_id})
    return MessageResponse(message="User deleted successfully")

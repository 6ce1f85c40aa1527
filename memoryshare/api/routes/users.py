import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from memoryshare.core.config import Settings, get_settings
from memoryshare.db.session import get_db
from memoryshare.models.user import User
from memoryshare.schemas.user import UserExistsResponse, UserResponse, UserUpsert
from memoryshare.utils.errors import api_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{uid}/exists", response_model=UserExistsResponse)
async def check_user_exists(uid: str, db: Session = Depends(get_db)):
    exists = db.query(User.uid).filter(User.uid == uid).first() is not None
    return UserExistsResponse(exists=exists)


@router.post("", response_model=UserResponse)
async def create_or_update_user(
    user_in: UserUpsert,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Create the user row on sign-up or first login, or update email/display name.

    An email already held by a different uid is a conflict (409) unless
    ALLOW_EMAIL_REASSIGNMENT is set, in which case the other row gives it up.
    """
    email = str(user_in.email).lower()
    holder = db.query(User).filter(User.email == email, User.uid != user_in.uid).first()
    if holder:
        if not settings.allow_email_reassignment:
            raise api_error(
                status.HTTP_409_CONFLICT,
                "Email already registered to another account",
                error="email-taken",
            )
        logger.warning(
            "[Users] Reassigning email %s from user %s to user %s (ALLOW_EMAIL_REASSIGNMENT)",
            email, holder.uid, user_in.uid,
        )
        holder.email = None
        db.flush()

    user = db.query(User).filter(User.uid == user_in.uid).first()
    if user:
        user.email = email
        if user_in.display_name is not None:
            user.display_name = user_in.display_name
        response.status_code = status.HTTP_200_OK
    else:
        user = User(uid=user_in.uid, email=email, display_name=user_in.display_name)
        db.add(user)
        response.status_code = status.HTTP_201_CREATED

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise api_error(status.HTTP_409_CONFLICT, "Email already registered to another account", error=str(e.orig))

    db.refresh(user)
    return user

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from memoryshare.core.plan_limits import normalize_plan, resolve_quota
from memoryshare.db.session import get_db
from memoryshare.models.space import Space
from memoryshare.schemas.space import (
    SlugCheckResponse,
    SpaceCreate,
    SpaceModeUpdate,
    SpaceResponse,
    SpaceUsageResponse,
    UserSpaceIdResponse,
)
from memoryshare.services.slugs import generate_slug, normalize_slug, resolve_unique_slug, slug_taken
from memoryshare.services.upload_admission import space_usage
from memoryshare.utils.errors import api_error

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_space_or_404(db: Session, space_id: str) -> Space:
    space = db.query(Space).filter(Space.id == space_id).first()
    if not space:
        raise api_error(status.HTTP_404_NOT_FOUND, "Space not found")
    return space


@router.post("", response_model=SpaceResponse, status_code=status.HTTP_201_CREATED)
async def create_space(space_in: SpaceCreate, db: Session = Depends(get_db)):
    """
    Create an event space. A slug that is already taken is replaced by the
    first free numeric (or timestamp) variant before inserting; the unique
    constraint on url_slug catches anything that slips through concurrently.
    """
    requested = space_in.url_slug or generate_slug(
        space_in.first_name, space_in.partner_first_name, space_in.event_date
    )
    if not normalize_slug(requested):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid URL slug", error=requested)

    try:
        slug = resolve_unique_slug(db, requested)
        space = Space(
            url_slug=slug,
            user_id=space_in.user_id,
            first_name=space_in.first_name,
            last_name=space_in.last_name,
            partner_first_name=space_in.partner_first_name,
            partner_last_name=space_in.partner_last_name,
            event_date=space_in.event_date,
            event_type=space_in.event_type,
            is_public=space_in.is_public,
            plan=normalize_plan(space_in.plan),
        )
        db.add(space)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        suggested = resolve_unique_slug(db, requested)
        logger.warning("[Spaces] Slug %s taken on insert, suggesting %s", requested, suggested)
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "URL slug is already taken",
            error=str(e.orig),
            suggestedSlug=suggested,
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("[Spaces] Error creating space")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create space", error=str(e))

    db.refresh(space)
    if slug != normalize_slug(requested):
        logger.info("[Spaces] Requested slug %s was taken, created %s", requested, slug)
    return space


@router.get("/check-slug/{url_slug}", response_model=SlugCheckResponse, response_model_exclude_none=True)
async def check_slug(url_slug: str, db: Session = Depends(get_db)):
    slug = normalize_slug(url_slug)
    if slug and slug == url_slug and not slug_taken(db, slug):
        return SlugCheckResponse(available=True, message="URL is available")
    return SlugCheckResponse(
        available=False,
        message="URL is already taken" if slug == url_slug else "URL contains invalid characters",
        suggested_slug=resolve_unique_slug(db, url_slug),
    )


@router.get("/user/{user_id}/spaceId", response_model=UserSpaceIdResponse)
async def get_user_space_id(user_id: str, db: Session = Depends(get_db)):
    space = (
        db.query(Space)
        .filter(Space.user_id == user_id)
        .order_by(Space.created_at.asc())
        .first()
    )
    if not space:
        raise api_error(status.HTTP_404_NOT_FOUND, "Space not found for this user")
    return UserSpaceIdResponse(space_id=space.id)


@router.get("/id/{space_id}", response_model=SpaceResponse)
async def get_space_by_id(space_id: str, db: Session = Depends(get_db)):
    return _get_space_or_404(db, space_id)


@router.patch("/{space_id}/mode", response_model=SpaceResponse)
async def update_space_mode(space_id: str, mode: SpaceModeUpdate, db: Session = Depends(get_db)):
    """Set public/private visibility. Setting the current value again is a no-op."""
    space = _get_space_or_404(db, space_id)
    if space.is_public != mode.is_public:
        space.is_public = mode.is_public
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update mode", error=str(e))
        db.refresh(space)
    return space


@router.get("/{space_id}/usage", response_model=SpaceUsageResponse)
async def get_space_usage(space_id: str, db: Session = Depends(get_db)):
    space = _get_space_or_404(db, space_id)
    quota = resolve_quota(space.plan)
    media_count, bytes_used = space_usage(db, space_id)
    return SpaceUsageResponse(
        plan=normalize_plan(space.plan),
        media_count=media_count,
        bytes_used=bytes_used,
        max_count=quota.max_count,
        max_bytes=quota.max_bytes,
    )


@router.get("/{url_slug}", response_model=SpaceResponse)
async def get_space_by_slug(url_slug: str, db: Session = Depends(get_db)):
    space = db.query(Space).filter(Space.url_slug == url_slug).first()
    if not space:
        raise api_error(status.HTTP_404_NOT_FOUND, "Space not found")
    return space

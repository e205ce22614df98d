# backend/coaching/routers/blocked_dates.py
# PATCH = 405, DELETE = ALLOWED (hard)

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import CoachBlockedDates as DBBlockedDates
from ..redis_client import get_redis
from ..schemas.availability import BlockedDateCreate, BlockedDateRead
from ..services.slots import invalidate_window_cache
from .deps import Caller, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blocked_dates", tags=["blocked_dates"])


@router.get("/", response_model=list[BlockedDateRead])
def list_blocked_dates(db: Session = Depends(get_db)):
    return db.query(DBBlockedDates).order_by(DBBlockedDates.blocked_date).all()


@router.post(
    "/", response_model=BlockedDateRead, status_code=status.HTTP_201_CREATED
)
def create_blocked_date(
    data: BlockedDateCreate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    caller: Caller = Depends(require_admin),
):
    obj = DBBlockedDates(**data.model_dump())
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{data.blocked_date} is already blocked",
        )
    db.refresh(obj)

    invalidate_window_cache(redis, [obj.blocked_date])
    logger.info(f"Date blocked: {obj.blocked_date} ({obj.reason}), by={caller.user_id}")
    return obj


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blocked_date(
    id: int,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    caller: Caller = Depends(require_admin),
):
    obj = db.get(DBBlockedDates, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    unblocked = obj.blocked_date
    db.delete(obj)
    db.commit()

    invalidate_window_cache(redis, [unblocked])
    logger.info(f"Date unblocked: {unblocked}, by={caller.user_id}")

"""
Resource registry: list, create, partial update and soft/hard delete.

DELETE MODES
============

soft (default):
  status -> Inactive. The row stays so historical bookings keep pointing
  at it.

hard:
  Only when no active booking (REQUEST/ONGOING) references the resource.
  Terminal bookings (SUCCESS/CANCEL) are deleted first, then the resource.
  Everything happens inside the request transaction; the resource row is
  locked first so a booking cannot slip in between the check and the delete.
"""

import enum
from typing import Optional

from sqlalchemy import select, delete, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking, ACTIVE_STATUSES, TERMINAL_STATUSES
from app.models.resource import Resource, ResourceStatus
from app.schemas.resource import ResourceCreate, ResourceUpdate
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.metrics import record_resource_operation
from app.core.logging import get_logger

logger = get_logger(__name__)

UPDATABLE_FIELDS = ("name", "subcategory", "type", "quantity", "status")
NON_NULLABLE_FIELDS = ("name", "quantity", "status")

DUPLICATE_MESSAGE = "Duplicate resource name for this kind"


class DeleteMode(str, enum.Enum):
    SOFT = "soft"
    HARD = "hard"

    @classmethod
    def from_query(cls, hard: Optional[str] = None, mode: Optional[str] = None) -> "DeleteMode":
        """Accepts ?hard=1|true|hard or ?mode=hard; anything else is soft."""
        flag = str(hard or mode or "").strip().lower()
        return cls.HARD if flag in ("1", "true", "hard") else cls.SOFT


async def list_resources(db: AsyncSession, kind: Optional[str] = None) -> list[Resource]:
    query = select(Resource)
    if kind:
        query = query.where(Resource.kind == kind.strip().upper()).order_by(Resource.name)
    else:
        query = query.order_by(Resource.kind, Resource.name)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_resource(db: AsyncSession, resource_id: int, for_update: bool = False) -> Resource:
    query = select(Resource).where(Resource.id == resource_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    resource = result.scalar_one_or_none()
    if not resource:
        raise NotFoundError(f"Resource {resource_id} not found")
    return resource


async def _ensure_unique_name(
    db: AsyncSession, kind: str, name: str, exclude_id: Optional[int] = None
) -> None:
    query = select(Resource.id).where(Resource.kind == kind, Resource.name == name)
    if exclude_id is not None:
        query = query.where(Resource.id != exclude_id)
    if (await db.execute(query)).first():
        logger.warning("resource_duplicate", kind=kind, name=name)
        raise ConflictError(DUPLICATE_MESSAGE, code="DUPLICATE")


async def _flush(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError as e:
        # Unique index lost a race with a concurrent insert/rename
        logger.warning("resource_integrity_error", error=str(e.orig))
        raise ConflictError(DUPLICATE_MESSAGE, code="DUPLICATE") from e


async def create_resource(db: AsyncSession, data: ResourceCreate) -> Resource:
    await _ensure_unique_name(db, data.kind, data.name)

    resource = Resource(
        kind=data.kind,
        name=data.name,
        subcategory=data.subcategory,
        type=data.type,
        quantity=data.quantity,
        status=data.status.value,
    )
    db.add(resource)
    await _flush(db)
    await db.refresh(resource)

    record_resource_operation("create")
    logger.info("resource_created", resource_id=resource.id, kind=resource.kind, name=resource.name)
    return resource


async def update_resource(db: AsyncSession, resource_id: int, data: ResourceUpdate) -> Resource:
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if k in UPDATABLE_FIELDS}
    if not changes:
        raise ValidationError("no fields to update")
    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} cannot be null")

    resource = await get_resource(db, resource_id)

    if "name" in changes and changes["name"] != resource.name:
        await _ensure_unique_name(db, resource.kind, changes["name"], exclude_id=resource.id)

    for field, value in changes.items():
        if isinstance(value, ResourceStatus):
            value = value.value
        setattr(resource, field, value)

    await _flush(db)
    await db.refresh(resource)

    record_resource_operation("update")
    logger.info("resource_updated", resource_id=resource.id, fields=sorted(changes))
    return resource


async def soft_delete_resource(db: AsyncSession, resource_id: int) -> Resource:
    resource = await get_resource(db, resource_id)
    resource.status = ResourceStatus.INACTIVE.value
    await db.flush()

    record_resource_operation("soft_delete")
    logger.info("resource_deactivated", resource_id=resource_id)
    return resource


async def hard_delete_resource(db: AsyncSession, resource_id: int) -> None:
    await get_resource(db, resource_id, for_update=True)

    in_use = await db.scalar(
        select(
            exists().where(
                Booking.resource_id == resource_id,
                Booking.status.in_(ACTIVE_STATUSES),
            )
        )
    )
    if in_use:
        logger.warning("resource_delete_blocked", resource_id=resource_id)
        raise ConflictError(
            "Cannot delete: there are active bookings (REQUEST/ONGOING) for this resource.",
            code="in_use",
        )

    purged = await db.execute(
        delete(Booking).where(
            Booking.resource_id == resource_id,
            Booking.status.in_(TERMINAL_STATUSES),
        )
    )
    await db.execute(delete(Resource).where(Resource.id == resource_id))
    await db.flush()

    record_resource_operation("hard_delete")
    logger.info("resource_deleted", resource_id=resource_id, bookings_removed=purged.rowcount)


async def delete_resource(db: AsyncSession, resource_id: int, mode: DeleteMode = DeleteMode.SOFT) -> None:
    if mode is DeleteMode.HARD:
        await hard_delete_resource(db, resource_id)
    else:
        await soft_delete_resource(db, resource_id)

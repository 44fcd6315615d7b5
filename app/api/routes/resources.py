"""
Resource registry endpoints. Reads are public; mutations need ADMIN or STAFF.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser, require_staff
from app.db.session import get_db
from app.schemas.resource import ResourceCreate, ResourceUpdate, ResourceResponse
from app.services import resource_service
from app.services.resource_service import DeleteMode

router = APIRouter(prefix="/resources", tags=["Resources"])


@router.get("", response_model=list[ResourceResponse])
async def list_resources(
    kind: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await resource_service.list_resources(db, kind)


@router.post("", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    data: ResourceCreate,
    user: CurrentUser = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    return await resource_service.create_resource(db, data)


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: int,
    data: ResourceUpdate,
    user: CurrentUser = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    return await resource_service.update_resource(db, resource_id, data)


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    resource_id: int,
    hard: Optional[str] = Query(None),
    mode: Optional[str] = Query(None),
    user: CurrentUser = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    """
    Soft delete (status -> Inactive) by default.
    ?hard=true removes the resource and its finished bookings, unless it
    still has active ones.
    """
    await resource_service.delete_resource(db, resource_id, DeleteMode.from_query(hard, mode))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

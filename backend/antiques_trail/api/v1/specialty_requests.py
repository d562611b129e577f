from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.models.analytics import RequestStatus, SpecialtyRequest
from ...domain.specialties import service as specialty_service
from ..deps import get_session, require_admin
from .schemas import SpecialtyRequestIn, SpecialtyRequestOut, SpecialtyRequestReview

router = APIRouter()


def _serialize_request(request: SpecialtyRequest) -> SpecialtyRequestOut:
    return SpecialtyRequestOut(
        id=request.id,
        place_id=request.place_id,
        request_text=request.request_text,
        status=request.status.value,
        created_at=request.created_at,
    )


@router.post("", response_model=SpecialtyRequestOut, status_code=status.HTTP_201_CREATED)
async def submit_request(payload: SpecialtyRequestIn, session: AsyncSession = Depends(get_session)) -> SpecialtyRequestOut:
    request = await specialty_service.submit_request(session, payload.place_id, payload.request_text)
    return _serialize_request(request)


@router.get("", response_model=list[SpecialtyRequestOut], dependencies=[Depends(require_admin)])
async def list_requests(
    session: AsyncSession = Depends(get_session),
    place_id: int | None = Query(default=None),
    status_filter: str = Query(default="pending", alias="status", description="pending, approved, rejected or all"),
) -> list[SpecialtyRequestOut]:
    requests = await specialty_service.list_requests(session, place_id=place_id, status_filter=status_filter)
    return [_serialize_request(request) for request in requests]


@router.patch("/{request_id}", response_model=SpecialtyRequestOut, dependencies=[Depends(require_admin)])
async def review_request(
    request_id: int, payload: SpecialtyRequestReview, session: AsyncSession = Depends(get_session)
) -> SpecialtyRequestOut:
    request = await specialty_service.review_request(session, request_id, RequestStatus(payload.status))
    return _serialize_request(request)

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.specialties import service as specialty_service
from ..deps import client_ip, get_session, require_admin
from .schemas import SearchAnalyticsOut, SpecialtySearchIn

router = APIRouter()


@router.post("", status_code=status.HTTP_204_NO_CONTENT)
async def log_search(
    payload: SpecialtySearchIn, request: Request, session: AsyncSession = Depends(get_session)
) -> Response:
    session_id = payload.session_id or request.cookies.get("session_id")
    await specialty_service.log_search(session, payload.specialty_id, client_ip(request), session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/analytics", response_model=SearchAnalyticsOut, dependencies=[Depends(require_admin)])
async def search_analytics(
    session: AsyncSession = Depends(get_session),
    days: int = Query(default=7, ge=1, le=365),
    limit: int = Query(default=20, ge=1, le=100),
) -> SearchAnalyticsOut:
    return SearchAnalyticsOut(**await specialty_service.search_analytics(session, days=days, limit=limit))

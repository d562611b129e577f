from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.places import links as link_service
from ...domain.places.service import get_place
from ..deps import get_session, require_admin
from .schemas import OnlineSalesLinkIn, OnlineSalesLinkOut, OnlineSalesLinkUpdate

# Mounted twice: under /places for the per-place collection and under /online-sales-links for items.
place_links_router = APIRouter()
router = APIRouter()


@place_links_router.get("/{place_id}/online-sales-links", response_model=list[OnlineSalesLinkOut])
async def list_links(place_id: int, session: AsyncSession = Depends(get_session)) -> list[OnlineSalesLinkOut]:
    await get_place(session, place_id)
    links = await link_service.list_links(session, place_id)
    return [OnlineSalesLinkOut.model_validate(link) for link in links]


@place_links_router.post(
    "/{place_id}/online-sales-links",
    response_model=OnlineSalesLinkOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_link(
    place_id: int, payload: OnlineSalesLinkIn, session: AsyncSession = Depends(get_session)
) -> OnlineSalesLinkOut:
    link = await link_service.create_link(session, place_id, payload.platform_name, payload.url, payload.description)
    return OnlineSalesLinkOut.model_validate(link)


@router.patch("/{link_id}", response_model=OnlineSalesLinkOut, dependencies=[Depends(require_admin)])
async def update_link(
    link_id: int, payload: OnlineSalesLinkUpdate, session: AsyncSession = Depends(get_session)
) -> OnlineSalesLinkOut:
    link = await link_service.update_link(session, link_id, payload.model_dump(exclude_unset=True))
    return OnlineSalesLinkOut.model_validate(link)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_link(link_id: int, session: AsyncSession = Depends(get_session)) -> Response:
    await link_service.delete_link(session, link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.logging import get_logger
from ...db.models.place import OnlineSalesLink, Place
from .validation import blank_to_none, format_website_url

logger = get_logger(__name__)


async def list_links(session: AsyncSession, place_id: int) -> list[OnlineSalesLink]:
    result = await session.execute(
        select(OnlineSalesLink)
        .where(OnlineSalesLink.place_id == place_id)
        .order_by(OnlineSalesLink.platform_name, OnlineSalesLink.id)
    )
    return list(result.scalars().all())


async def get_link(session: AsyncSession, link_id: int) -> OnlineSalesLink:
    link = await session.get(OnlineSalesLink, link_id)
    if link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Online sales link not found")
    return link


async def create_link(
    session: AsyncSession, place_id: int, platform_name: str, url: str, description: str | None = None
) -> OnlineSalesLink:
    if await session.get(Place, place_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Place not found")
    link = OnlineSalesLink(
        place_id=place_id,
        platform_name=platform_name.strip(),
        url=format_website_url(url),
        description=blank_to_none(description),
    )
    session.add(link)
    await session.commit()
    await session.refresh(link)
    logger.info("online_sales_link_created", extra={"place_id": place_id, "link_id": link.id})
    return link


async def update_link(session: AsyncSession, link_id: int, changes: dict[str, Any]) -> OnlineSalesLink:
    link = await get_link(session, link_id)
    if changes.get("platform_name") is not None:
        link.platform_name = changes["platform_name"].strip()
    if changes.get("url") is not None:
        link.url = format_website_url(changes["url"])
    if "description" in changes:
        link.description = blank_to_none(changes["description"])
    await session.commit()
    await session.refresh(link)
    return link


async def delete_link(session: AsyncSession, link_id: int) -> None:
    link = await get_link(session, link_id)
    await session.delete(link)
    await session.commit()

"""postcodes.io client used to place shops on the map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
from urllib.parse import quote

import httpx

from ...core.config import settings
from ...core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


class PostcodeGeocoder:
    """Look up coordinates for UK postcodes; failures come back as ``None``."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        batch_size: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.postcodes_api_url).rstrip("/")
        self.batch_size = batch_size or settings.geocode_batch_size
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.geocode_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "PostcodeGeocoder":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _coordinates(result: dict | None) -> Coordinates | None:
        if not result or result.get("latitude") is None or result.get("longitude") is None:
            return None
        return Coordinates(lat=float(result["latitude"]), lng=float(result["longitude"]))

    async def lookup(self, postcode: str) -> Coordinates | None:
        cleaned = postcode.strip()
        if not cleaned:
            return None
        try:
            response = await self._client.get(f"{self.base_url}/{quote(cleaned)}")
        except httpx.HTTPError as exc:
            logger.warning("postcode_lookup_failed", extra={"postcode": cleaned, "error": str(exc)})
            return None
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info("postcode_not_found", extra={"postcode": cleaned})
            return None
        if response.is_error:
            logger.warning("postcode_lookup_failed", extra={"postcode": cleaned, "status_code": response.status_code})
            return None
        return self._coordinates(response.json().get("result"))

    async def bulk_lookup(self, postcodes: Iterable[str]) -> dict[str, Coordinates | None]:
        """Resolve many postcodes, ``batch_size`` per request. Keys are the postcodes as given."""

        wanted = list(dict.fromkeys(p.strip() for p in postcodes if p and p.strip()))
        found: dict[str, Coordinates | None] = {postcode: None for postcode in wanted}
        for start in range(0, len(wanted), self.batch_size):
            batch = wanted[start : start + self.batch_size]
            try:
                response = await self._client.post(self.base_url, json={"postcodes": batch})
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.warning("postcode_batch_failed", extra={"batch_start": start, "batch_size": len(batch), "error": str(exc)})
                continue
            for item in response.json().get("result") or []:
                query = item.get("query")
                if query in found:
                    found[query] = self._coordinates(item.get("result"))
        logger.info(
            "postcodes_geocoded",
            extra={"requested": len(wanted), "resolved": sum(1 for value in found.values() if value is not None)},
        )
        return found

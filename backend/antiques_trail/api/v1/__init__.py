from fastapi import APIRouter

from . import auth, health, online_sales_links, opening_hours, place_types, places, specialties, specialty_requests, specialty_searches

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])  # type: ignore[arg-type]
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])  # type: ignore[arg-type]
api_router.include_router(places.router, prefix="/places", tags=["places"])  # type: ignore[arg-type]
api_router.include_router(opening_hours.router, prefix="/places", tags=["opening-hours"])  # type: ignore[arg-type]
api_router.include_router(online_sales_links.place_links_router, prefix="/places", tags=["online-sales-links"])  # type: ignore[arg-type]
api_router.include_router(online_sales_links.router, prefix="/online-sales-links", tags=["online-sales-links"])  # type: ignore[arg-type]
api_router.include_router(place_types.router, prefix="/place-types", tags=["place-types"])  # type: ignore[arg-type]
api_router.include_router(specialties.router, prefix="/specialties", tags=["specialties"])  # type: ignore[arg-type]
api_router.include_router(specialty_requests.router, prefix="/specialty-requests", tags=["specialties"])  # type: ignore[arg-type]
api_router.include_router(specialty_searches.router, prefix="/specialty-searches", tags=["specialties"])  # type: ignore[arg-type]

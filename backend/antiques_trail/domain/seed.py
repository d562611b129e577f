"""Starter data for a fresh database: place types, the specialty tree, a few shops."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..db.models.place import PlaceType
from ..db.models.specialty import Specialty
from .place_types.service import get_or_create_place_type
from .importer.service import find_existing
from .places.service import create_place
from .specialties.service import find_by_name, list_specialties

logger = get_logger(__name__)

PLACE_TYPES = {
    "Antique Shop": "Shops selling antique furniture, decorative items, and collectibles.",
    "Auction House": "Establishments that conduct auctions of antiques and collectibles.",
    "Second-hand Book Shop": "Shops specializing in used, rare, and antiquarian books.",
    "Record Shop": "Shops selling vinyl records, including rare and vintage recordings.",
    "Vintage Clothing Shop": "Shops specializing in period clothing and accessories.",
    "Antique Fair": "Regular or periodic events featuring multiple antique dealers.",
}

SPECIALTY_CATEGORIES = {
    "Vintage Clothing": ["Bags", "Hats", "Kilts", "Pocket Watches", "Sporrans", "Tweed", "Walking Sticks"],
    "Militaria": ["Badges", "Medals", "Memorabilia", "Uniforms"],
    "Collectables": ["Autographs", "Cigarette Cards", "Coins", "Maps", "Postcards", "Stamps", "Toys"],
    "Ceramics Glass Pottery": ["Art Glass", "Mauchlinware", "Porcelain", "Pottery", "Tea Sets", "Vases"],
    "Silver Gold Metalware": ["Brassware", "Candlesticks", "Cutlery", "Pewter", "Silver", "Trophies"],
    "Furniture": ["Bookcases", "Cabinets", "Chairs", "Desks", "Grandfather Clocks", "Tables"],
    "Writing & Desk Accessories": ["Fountain Pens", "Inkwells", "Paperweights", "Writing Boxes"],
    "Books & Records": ["Antiquarian Books", "First Editions", "Vinyl Records"],
}

SAMPLE_PLACES = [
    {
        "name": "Georgian Antiques",
        "address": "10 Pattison Street, Leith, Edinburgh EH6 7HF",
        "address_postcode": "EH6 7HF",
        "phone": "0131 553 7286",
        "website": "https://www.georgianantiques.net/",
        "description": "Large antique warehouse with furniture and decorative items across two floors.",
        "specialties_text": "Furniture, Cabinets, Tables",
        "opening_hours_text": "Mon-Fri: 10:00-17:00, Sat: 10:00-16:00, Sun: Closed",
        "lat": 55.9757,
        "lng": -3.1776,
        "type_name": "Antique Shop",
        "price_range": "£££",
    },
    {
        "name": "Lyon & Turnbull",
        "address": "33 Broughton Place, Edinburgh EH1 3RR",
        "address_postcode": "EH1 3RR",
        "phone": "0131 557 8844",
        "website": "https://www.lyonandturnbull.com/",
        "description": "Auction house for fine art and antiques.",
        "specialties_text": "Silver, Art Glass, Furniture",
        "opening_hours_text": "Mon-Fri: 9:00-17:00, Sat & Sun: By appointment",
        "lat": 55.9586,
        "lng": -3.1890,
        "type_name": "Auction House",
        "price_range": "££££",
    },
    {
        "name": "Armchair Books",
        "address": "72-74 West Port, Edinburgh EH1 2LE",
        "address_postcode": "EH1 2LE",
        "phone": "0131 229 5927",
        "description": "Second-hand bookshop with floor to ceiling shelves.",
        "specialties_text": "Antiquarian Books, First Editions",
        "opening_hours_text": "Mon-Sat: 10:00-18:30, Sun: 12:00-18:00",
        "lat": 55.9467,
        "lng": -3.1986,
        "type_name": "Second-hand Book Shop",
        "price_range": "££",
    },
    {
        "name": "Armstrong's Vintage",
        "address": "83 Grassmarket, Edinburgh EH1 2HJ",
        "address_postcode": "EH1 2HJ",
        "phone": "0131 220 5557",
        "description": "Vintage clothing store.",
        "specialties_text": "Vintage Clothing, Tweed, Kilts, Hats",
        "opening_hours_text": "Mon-Sat: 10:00-18:00, Sun: 11:00-17:00",
        "lat": 55.9471,
        "lng": -3.1972,
        "type_name": "Vintage Clothing Shop",
        "price_range": "££",
    },
]


async def seed_specialties(session: AsyncSession) -> int:
    created = 0
    for main_name, sub_names in SPECIALTY_CATEGORIES.items():
        main = await find_by_name(session, main_name)
        if main is None:
            main = Specialty(name=main_name)
            session.add(main)
            await session.flush()
            created += 1
        for sub_name in sub_names:
            if await find_by_name(session, sub_name) is None:
                session.add(Specialty(name=sub_name, parent_id=main.id))
                await session.flush()
                created += 1
    await session.commit()
    return created


async def link_type_specialties(session: AsyncSession, type_ids: list[int]) -> int:
    """Offer every specialty under each of the given place types; existing links are kept."""

    specialties = await list_specialties(session)
    linked = 0
    for type_id in type_ids:
        place_type = await session.get(PlaceType, type_id)
        known = {specialty.id for specialty in place_type.specialties}
        for specialty in specialties:
            if specialty.id not in known:
                place_type.specialties.append(specialty)
                linked += 1
    await session.commit()
    return linked


async def seed(session: AsyncSession, *, with_places: bool = True) -> dict[str, int]:
    """Insert whatever is missing; running it twice changes nothing."""

    types_created = 0
    type_ids: dict[str, int] = {}
    for name, description in PLACE_TYPES.items():
        place_type, created = await get_or_create_place_type(session, name)
        if created:
            place_type.description = description
            types_created += 1
        type_ids[name] = place_type.id
    await session.commit()

    specialties_created = await seed_specialties(session)
    links_created = await link_type_specialties(session, list(type_ids.values()))

    places_created = 0
    if with_places:
        for sample in SAMPLE_PLACES:
            fields = {key: value for key, value in sample.items() if key != "type_name"}
            if await find_existing(session, fields["name"], fields["address_postcode"], fields["address"]):
                continue
            fields["type_id"] = type_ids[sample["type_name"]]
            await create_place(session, fields)
            places_created += 1

    counts = {
        "place_types": types_created,
        "specialties": specialties_created,
        "type_specialty_links": links_created,
        "places": places_created,
    }
    logger.info("seed_finished", extra=counts)
    return counts

from typing import Any

from httpx import AsyncClient

from antiques_trail.db.models.place import PlaceType

API = "/api/v1"


async def _create(client: AsyncClient, headers: dict[str, str], type_id: int, **fields: Any) -> dict:
    payload = {
        "name": "Armchair Books",
        "address": "72-74 West Port, Edinburgh",
        "lat": 55.9467,
        "lng": -3.1986,
        "type_id": type_id,
    }
    payload.update(fields)
    response = await client.post(f"{API}/places", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_place_normalizes_fields_and_parses_hours(
    client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType
) -> None:
    place = await _create(
        client,
        admin_headers,
        place_type.id,
        website="armchairbooks.co.uk",
        address_postcode="eh12le",
        specialties="Rare Books, First Editions",
        opening_hours="Mon-Sat: 10:00-18:30, Sun: 12:00-18:00",
    )

    assert place["website"] == "https://armchairbooks.co.uk"
    assert place["address_postcode"] == "EH1 2LE"
    assert place["address_city"] == "Edinburgh"
    assert place["type_name"] == "Antique Shop"
    assert place["specialty_names"] == ["First Editions", "Rare Books"]
    assert place["opening_hours"] == "Monday to Saturday: 10:00 - 18:30\nSunday: 12:00 - 18:00"
    assert len(place["hours"]) == 7
    assert place["hours"][0] == {
        "day_of_week": 0,
        "day_name": "Sunday",
        "open_time": "12:00",
        "close_time": "18:00",
        "is_closed": False,
        "is_by_appointment": False,
        "notes": None,
    }


async def test_unparseable_hours_text_is_kept_as_written(
    client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType
) -> None:
    place = await _create(client, admin_headers, place_type.id, opening_hours="Check website for fair dates")
    assert place["opening_hours"] == "Check website for fair dates"
    assert place["hours"] == []


async def test_mutations_require_admin(client: AsyncClient, place_type: PlaceType) -> None:
    payload = {"name": "X", "address": "Y", "lat": 55.95, "lng": -3.19, "type_id": place_type.id}
    assert (await client.post(f"{API}/places", json=payload)).status_code == 401
    bad_token = {"Authorization": "Bearer not-a-token"}
    assert (await client.post(f"{API}/places", json=payload, headers=bad_token)).status_code == 401


async def test_create_rejects_bad_contact_details_and_unknown_type(
    client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType
) -> None:
    payload = {"name": "X", "address": "Y", "lat": 55.95, "lng": -3.19, "type_id": place_type.id, "email": "nope"}
    response = await client.post(f"{API}/places", json=payload, headers=admin_headers)
    assert response.status_code == 400
    assert "email" in response.json()["detail"]

    payload.update(email=None, type_id=999)
    response = await client.post(f"{API}/places", json=payload, headers=admin_headers)
    assert response.status_code == 400

    payload.update(type_id=place_type.id, price_range="cheap")
    assert (await client.post(f"{API}/places", json=payload, headers=admin_headers)).status_code == 422


async def test_search_and_filters(client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType) -> None:
    await _create(client, admin_headers, place_type.id, name="Armchair Books", price_range="££", specialties="Maps")
    await _create(
        client,
        admin_headers,
        place_type.id,
        name="Georgian Antiques",
        address="10 Pattison Street, Leith",
        price_range="£££",
        description="Huge warehouse of furniture",
    )

    async def names(**params: Any) -> list[str]:
        response = await client.get(f"{API}/places", params=params)
        assert response.status_code == 200
        return [place["name"] for place in response.json()]

    assert await names() == ["Armchair Books", "Georgian Antiques"]
    assert await names(search="leith") == ["Georgian Antiques"]
    assert await names(search="WAREHOUSE") == ["Georgian Antiques"]
    assert await names(search="maps") == ["Armchair Books"]
    assert await names(price_range="££") == ["Armchair Books"]
    assert await names(type_id=place_type.id + 1) == []


async def test_specialty_filter_main_and_subcategories(
    client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType
) -> None:
    async def specialty(name: str, parent_id: int | None = None) -> int:
        response = await client.post(
            f"{API}/specialties", json={"name": name, "parent_id": parent_id}, headers=admin_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["id"]

    furniture = await specialty("Furniture")
    tables = await specialty("Tables", furniture)
    chairs = await specialty("Chairs", furniture)

    await _create(client, admin_headers, place_type.id, name="Table Shop", specialty_ids=[tables])
    await _create(client, admin_headers, place_type.id, name="Chair Shop", specialty_ids=[chairs])
    await _create(client, admin_headers, place_type.id, name="General Dealer", specialty_ids=[furniture])
    await _create(client, admin_headers, place_type.id, name="Mentions Tables", specialties="Old tables")

    async def names(ids: list[int]) -> list[str]:
        response = await client.get(f"{API}/places", params={"specialties": ",".join(map(str, ids))})
        return sorted(place["name"] for place in response.json())

    assert await names([furniture]) == ["Chair Shop", "General Dealer", "Table Shop"]
    assert await names([tables]) == ["Mentions Tables", "Table Shop"]
    assert await names([furniture, tables]) == ["Table Shop"]
    assert len(await names([12345])) == 4


async def test_update_place(client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType) -> None:
    place = await _create(client, admin_headers, place_type.id, opening_hours="Mon-Fri: 9-5")
    url = f"{API}/places/{place['id']}"

    response = await client.patch(url, json={"specialties": "Silver, Clocks", "phone": "0131 229 5927"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["specialty_names"] == ["Clocks", "Silver"]
    assert response.json()["name"] == "Armchair Books"

    silver_id = response.json()["specialty_ids"][1]
    response = await client.patch(
        url, json={"specialty_ids": [silver_id], "specialties": "ignored"}, headers=admin_headers
    )
    assert response.json()["specialty_names"] == ["Silver"]
    assert response.json()["specialties"] == "Silver"

    response = await client.patch(url, json={"opening_hours": "whenever we feel like it"}, headers=admin_headers)
    assert response.status_code == 400

    response = await client.patch(url, json={"opening_hours": "Daily: 10am-4pm"}, headers=admin_headers)
    assert response.json()["opening_hours"] == "Every day: 10:00 - 16:00"

    response = await client.patch(url, json={"name": None}, headers=admin_headers)
    assert response.status_code == 400


async def test_delete_place(client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType) -> None:
    place = await _create(client, admin_headers, place_type.id, opening_hours="Mon: 9-5")
    url = f"{API}/places/{place['id']}"
    assert (await client.delete(url, headers=admin_headers)).status_code == 204
    assert (await client.get(url)).status_code == 404
    assert (await client.delete(url, headers=admin_headers)).status_code == 404


async def test_dashboard_stats(client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType) -> None:
    await _create(client, admin_headers, place_type.id, name="A", price_range="££££")
    await _create(client, admin_headers, place_type.id, name="B", price_range="£")
    await _create(client, admin_headers, place_type.id, name="C")

    stats = (await client.get(f"{API}/places/stats")).json()
    assert stats["total_places"] == 3
    assert stats["by_type"] == [{"type_id": place_type.id, "type_name": "Antique Shop", "count": 3}]
    assert [row["price_range"] for row in stats["by_price_range"]] == ["£", "££££", None]

from typing import Awaitable, Callable

from httpx import AsyncClient

from antiques_trail.db.models.place import Place, PlaceType

API = "/api/v1/place-types"


async def test_create_and_list_place_types(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    for name in ("Auction House", "Antique Centre"):
        response = await client.post(API, json={"name": name}, headers=admin_headers)
        assert response.status_code == 201

    response = await client.get(API)
    assert [item["name"] for item in response.json()] == ["Antique Centre", "Auction House"]


async def test_duplicate_name_conflicts(
    client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType
) -> None:
    response = await client.post(API, json={"name": "antique shop"}, headers=admin_headers)
    assert response.status_code == 409

    other = (await client.post(API, json={"name": "Flea Market"}, headers=admin_headers)).json()
    response = await client.patch(f"{API}/{other['id']}", json={"name": "Antique Shop"}, headers=admin_headers)
    assert response.status_code == 409


async def test_update_place_type(client: AsyncClient, admin_headers: dict[str, str], place_type: PlaceType) -> None:
    response = await client.patch(
        f"{API}/{place_type.id}", json={"description": "Shops selling antiques"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Antique Shop"
    assert response.json()["description"] == "Shops selling antiques"


async def test_place_type_specialties(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    ids = {}
    for name in ("Clocks", "Maps", "Silver"):
        response = await client.post("/api/v1/specialties", json={"name": name}, headers=admin_headers)
        ids[name] = response.json()["id"]

    response = await client.post(
        API, json={"name": "Map Dealer", "specialty_ids": [ids["Maps"], ids["Clocks"]]}, headers=admin_headers
    )
    assert response.status_code == 201
    dealer = response.json()
    assert sorted(dealer["specialty_ids"]) == sorted([ids["Maps"], ids["Clocks"]])

    listed = (await client.get("/api/v1/specialties", params={"type_id": dealer["id"]})).json()
    assert [item["name"] for item in listed] == ["Clocks", "Maps"]

    response = await client.patch(f"{API}/{dealer['id']}", json={"specialty_ids": [ids["Silver"]]}, headers=admin_headers)
    assert response.json()["specialty_ids"] == [ids["Silver"]]
    listed = (await client.get("/api/v1/specialties", params={"type_id": dealer["id"]})).json()
    assert [item["name"] for item in listed] == ["Silver"]

    response = await client.patch(f"{API}/{dealer['id']}", json={"description": "Maps"}, headers=admin_headers)
    assert response.json()["specialty_ids"] == [ids["Silver"]]

    response = await client.post(API, json={"name": "Clock Shop", "specialty_ids": [999]}, headers=admin_headers)
    assert response.status_code == 400
    response = await client.patch(f"{API}/{dealer['id']}", json={"specialty_ids": [999]}, headers=admin_headers)
    assert response.status_code == 400
    assert [item["name"] for item in (await client.get(API)).json()] == ["Map Dealer"]


async def test_delete_place_type_in_use_conflicts(
    client: AsyncClient,
    admin_headers: dict[str, str],
    place_type: PlaceType,
    make_place: Callable[..., Awaitable[Place]],
) -> None:
    await make_place()
    assert (await client.delete(f"{API}/{place_type.id}", headers=admin_headers)).status_code == 409

    unused = (await client.post(API, json={"name": "Vintage Shop"}, headers=admin_headers)).json()
    assert (await client.delete(f"{API}/{unused['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"{API}/{unused['id']}")).status_code == 404


async def test_place_type_writes_require_admin(client: AsyncClient) -> None:
    assert (await client.post(API, json={"name": "Vintage Shop"})).status_code == 401

from typing import Awaitable, Callable

from httpx import AsyncClient

from antiques_trail.db.models.place import Place

API = "/api/v1"


async def _specialty(client: AsyncClient, headers: dict[str, str], name: str, parent_id: int | None = None) -> dict:
    response = await client.post(f"{API}/specialties", json={"name": name, "parent_id": parent_id}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_specialty_tree_and_filters(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    silver = await _specialty(client, admin_headers, "Silver")
    await _specialty(client, admin_headers, "Cutlery", silver["id"])
    await _specialty(client, admin_headers, "Candlesticks", silver["id"])
    await _specialty(client, admin_headers, "Ceramics")

    tree = (await client.get(f"{API}/specialties", params={"hierarchical": True})).json()
    assert [node["name"] for node in tree] == ["Ceramics", "Silver"]
    assert [child["name"] for child in tree[1]["subcategories"]] == ["Candlesticks", "Cutlery"]

    main = (await client.get(f"{API}/specialties", params={"main_only": True})).json()
    assert [item["name"] for item in main] == ["Ceramics", "Silver"]
    assert all(item["is_main_category"] for item in main)

    children = (await client.get(f"{API}/specialties", params={"parent_id": silver["id"]})).json()
    assert [item["name"] for item in children] == ["Candlesticks", "Cutlery"]

    named = (await client.get(f"{API}/specialties", params=[("name", "silver"), ("name", "CERAMICS")])).json()
    assert [item["name"] for item in named] == ["Ceramics", "Silver"]

    assert (await client.get(f"{API}/specialties", params={"ids": ""})).json() == []


async def test_specialty_validation(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    silver = await _specialty(client, admin_headers, "Silver")
    cutlery = await _specialty(client, admin_headers, "Cutlery", silver["id"])

    response = await client.post(f"{API}/specialties", json={"name": "SILVER"}, headers=admin_headers)
    assert response.status_code == 409

    response = await client.post(
        f"{API}/specialties", json={"name": "Forks", "parent_id": cutlery["id"]}, headers=admin_headers
    )
    assert response.status_code == 400

    response = await client.patch(
        f"{API}/specialties/{silver['id']}", json={"parent_id": silver["id"]}, headers=admin_headers
    )
    assert response.status_code == 400

    assert (await client.get(f"{API}/specialties/999")).status_code == 404


async def test_deleting_main_category_promotes_subcategories(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    silver = await _specialty(client, admin_headers, "Silver")
    cutlery = await _specialty(client, admin_headers, "Cutlery", silver["id"])

    assert (await client.delete(f"{API}/specialties/{silver['id']}", headers=admin_headers)).status_code == 204

    response = await client.get(f"{API}/specialties/{cutlery['id']}")
    assert response.json()["parent_id"] is None
    assert response.json()["is_main_category"] is True


async def test_place_specialties_and_counts(
    client: AsyncClient, admin_headers: dict[str, str], make_place: Callable[..., Awaitable[Place]]
) -> None:
    silver = await _specialty(client, admin_headers, "Silver")
    cutlery = await _specialty(client, admin_headers, "Cutlery", silver["id"])
    clocks = await _specialty(client, admin_headers, "Clocks")
    place = await make_place()

    response = await client.put(
        f"{API}/places/{place.id}/specialties", json={"specialty_ids": [cutlery["id"], clocks["id"]]}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["specialties"] == "Clocks, Cutlery"

    split = (await client.get(f"{API}/places/{place.id}/specialties")).json()
    assert [item["name"] for item in split["main_categories"]] == ["Clocks"]
    assert [item["name"] for item in split["subcategories"]] == ["Cutlery"]

    tree = (await client.get(f"{API}/specialties", params={"place_id": place.id, "hierarchical": True})).json()
    assert [item["name"] for item in tree] == ["Clocks", "Cutlery", "Silver"]

    counts = {row["name"]: row["place_count"] for row in (await client.get(f"{API}/specialties/counts")).json()}
    assert counts == {"Clocks": 1, "Cutlery": 1, "Silver": 0}

    response = await client.put(
        f"{API}/places/{place.id}/specialties", json={"specialty_ids": [12345]}, headers=admin_headers
    )
    assert response.status_code == 400


async def test_renaming_or_deleting_specialty_rewrites_place_text(
    client: AsyncClient, admin_headers: dict[str, str], make_place: Callable[..., Awaitable[Place]]
) -> None:
    clocks = await _specialty(client, admin_headers, "Clocks")
    maps = await _specialty(client, admin_headers, "Maps")
    place = await make_place(specialty_ids=[clocks["id"], maps["id"]])
    assert place.specialties_text == "Clocks, Maps"

    async def names(search: str) -> list[str]:
        return [item["name"] for item in (await client.get(f"{API}/places", params={"search": search})).json()]

    response = await client.patch(f"{API}/specialties/{clocks['id']}", json={"name": "Barometers"}, headers=admin_headers)
    assert response.status_code == 200
    assert (await client.get(f"{API}/places/{place.id}")).json()["specialties"] == "Barometers, Maps"
    assert await names("clocks") == []
    assert await names("barometers") == ["Georgian Antiques"]

    assert (await client.delete(f"{API}/specialties/{maps['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"{API}/places/{place.id}")).json()["specialties"] == "Barometers"
    assert await names("maps") == []

    assert (await client.delete(f"{API}/specialties/{clocks['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"{API}/places/{place.id}")).json()["specialties"] is None


async def test_specialty_requests_flow(
    client: AsyncClient, admin_headers: dict[str, str], make_place: Callable[..., Awaitable[Place]]
) -> None:
    place = await make_place()

    response = await client.post(
        f"{API}/specialty-requests", json={"place_id": place.id, "request_text": "  They also sell maps  "}
    )
    assert response.status_code == 201
    request = response.json()
    assert request["status"] == "pending"
    assert request["request_text"] == "They also sell maps"

    assert (await client.get(f"{API}/specialty-requests")).status_code == 401
    pending = (await client.get(f"{API}/specialty-requests", headers=admin_headers)).json()
    assert [item["id"] for item in pending] == [request["id"]]

    response = await client.patch(
        f"{API}/specialty-requests/{request['id']}", json={"status": "approved"}, headers=admin_headers
    )
    assert response.json()["status"] == "approved"

    assert (await client.get(f"{API}/specialty-requests", headers=admin_headers)).json() == []
    approved = (
        await client.get(f"{API}/specialty-requests", params={"status": "approved"}, headers=admin_headers)
    ).json()
    assert len(approved) == 1

    missing_place = {"place_id": 9999, "request_text": "hello"}
    assert (await client.post(f"{API}/specialty-requests", json=missing_place)).status_code == 404


async def test_search_logging_and_analytics(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    silver = await _specialty(client, admin_headers, "Silver")
    clocks = await _specialty(client, admin_headers, "Clocks")

    for specialty in (silver, silver, clocks):
        response = await client.post(
            f"{API}/specialty-searches",
            json={"specialty_id": specialty["id"], "session_id": "abc"},
            headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
        )
        assert response.status_code == 204

    assert (await client.post(f"{API}/specialty-searches", json={"specialty_id": 999})).status_code == 404

    analytics = (await client.get(f"{API}/specialty-searches/analytics", headers=admin_headers)).json()
    assert analytics["days"] == 7
    assert analytics["total_searches"] == 3
    assert [(row["name"], row["search_count"]) for row in analytics["top_searches"]] == [("Silver", 2), ("Clocks", 1)]

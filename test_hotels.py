import httpx

from services import hotel_search


def _stub(monkeypatch, geo_id=None, hotels=None, error=None):
    calls = {}

    async def fake_location(query):
        calls["query"] = query
        if error:
            raise error
        return geo_id

    async def fake_hotels(geo, check_in, check_out):
        calls["hotels"] = (geo, check_in.isoformat(), check_out.isoformat())
        return hotels or []

    monkeypatch.setattr(hotel_search, "search_location", fake_location)
    monkeypatch.setattr(hotel_search, "search_hotels", fake_hotels)
    return calls


def test_hotel_search_chains_lookups(client, monkeypatch):
    calls = _stub(monkeypatch, geo_id=187147, hotels=[{"id": "1", "title": "Hotel Lutetia"}])

    resp = client.get(
        "/hotels/search",
        params={"destination": " Paris ", "check_in": "2030-03-01", "check_out": "2030-03-04"},
    )
    assert resp.status_code == 200
    assert resp.json()["hotels"] == [{"id": "1", "title": "Hotel Lutetia"}]
    assert calls == {"query": "Paris", "hotels": (187147, "2030-03-01", "2030-03-04")}


def test_hotel_search_errors(client, monkeypatch):
    assert client.get("/hotels/search", params={"destination": "  "}).status_code == 400

    _stub(monkeypatch, geo_id=None)
    resp = client.get("/hotels/search", params={"destination": "Atlantis"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Location not found"

    _stub(monkeypatch, geo_id=1, hotels=[])
    resp = client.get("/hotels/search", params={"destination": "Nowhere"})
    assert resp.json()["detail"] == "No hotels found"

    _stub(monkeypatch, error=httpx.ConnectError("boom"))
    assert client.get("/hotels/search", params={"destination": "Rome"}).status_code == 502


def test_hotel_search_rejects_inverted_dates(client, monkeypatch):
    _stub(monkeypatch, geo_id=1, hotels=[{"id": "1"}])
    resp = client.get(
        "/hotels/search",
        params={"destination": "Rome", "check_in": "2030-03-04", "check_out": "2030-03-01"},
    )
    assert resp.status_code == 400


def test_search_location_reads_first_geo_id(monkeypatch):
    import asyncio

    def handler(request):
        assert request.url.params["query"] == "Lisbon"
        assert "x-rapidapi-host" in request.headers
        return httpx.Response(200, json={"data": [{"geoId": 189158}, {"geoId": 1}]})

    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        hotel_search.httpx,
        "AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )
    assert asyncio.run(hotel_search.search_location("Lisbon")) == 189158

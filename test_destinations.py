import pytest

from services import destinations
from services.destinations import DestinationError, build_prompt, parse_destination


def test_parse_destination_drops_blank_lines():
    text = "\n  Tbilisi, Georgia \n\nSulfur baths line the old town.\n  Wine is made in clay jars.  \n"
    assert parse_destination(text) == {
        "destination": "Tbilisi, Georgia",
        "description": "Sulfur baths line the old town.\nWine is made in clay jars.",
    }


def test_parse_destination_single_line():
    assert parse_destination("Hoi An, Vietnam") == {"destination": "Hoi An, Vietnam", "description": ""}


def test_parse_destination_rejects_empty_reply():
    with pytest.raises(DestinationError):
        parse_destination("  \n ")


def test_prompt_carries_seed():
    assert "42.5" in build_prompt(42.5)


def test_random_destination_endpoint(client, monkeypatch):
    monkeypatch.setattr(
        destinations, "generate_destination_text", lambda prompt: "Valparaiso, Chile\nColourful hills."
    )
    resp = client.get("/destinations/random")
    assert resp.status_code == 200
    assert resp.json() == {"destination": "Valparaiso, Chile", "description": "Colourful hills."}


def test_random_destination_failure(client):
    # no API key configured in tests
    resp = client.get("/destinations/random")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to get destination suggestion"

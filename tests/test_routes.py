"""
Tests for the HTTP endpoints.
"""
import asyncio
import io

from fastapi.testclient import TestClient
from PIL import Image

from restobot.core.extraction.decode import ExtractionError
from restobot.core.chat import FALLBACK_MESSAGE
from restobot.services.llm_client import LLMClientError


def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


class TestRestaurants:
    def test_upsert_get_and_list(self, client: TestClient):
        response = client.post("/restaurants/r1", json={"name": "Luigi's", "id": "ignored"})

        assert response.status_code == 200
        assert response.json() == {"id": "r1", "name": "Luigi's", "menu": [], "offers": [], "faq": []}
        assert client.get("/restaurants/r1").json()["name"] == "Luigi's"
        assert [r["id"] for r in client.get("/restaurants").json()] == ["r1"]

    def test_upsert_merges_menu_and_appends_offers(self, client: TestClient):
        client.post("/restaurants/r2", json={
            "menu": [{"category": "Pizza", "items": [{"name": "Margherita", "price": "$10"}]}],
            "offers": [{"title": "A"}],
        })
        response = client.post("/restaurants/r2", json={
            "menu": [{"category": "pizza", "items": [{"name": "margherita", "price": "", "notes": "Classic"}]}],
            "offers": [{"title": "B"}],
            "replaceOffers": False,
        })

        data = response.json()
        assert data["menu"] == [{"category": "Pizza", "items": [{"name": "Margherita", "price": "$10", "notes": "Classic"}]}]
        assert data["offers"] == [{"title": "A"}, {"title": "B"}]
        assert "replaceOffers" not in data

    def test_upsert_with_empty_body(self, client: TestClient):
        response = client.post("/restaurants/r3")
        assert response.status_code == 200
        assert response.json()["id"] == "r3"

    def test_unknown_restaurant(self, client: TestClient):
        assert client.get("/restaurants/nope").status_code == 404
        assert client.delete("/restaurants/nope").status_code == 404

    def test_delete(self, client: TestClient):
        client.post("/restaurants/r1", json={"name": "Luigi's"})
        response = client.delete("/restaurants/r1")
        assert response.status_code == 200
        assert response.json()["id"] == "r1"
        assert client.get("/restaurants").json() == []


class TestChat:
    def test_missing_fields(self, client: TestClient):
        assert client.post("/chat", json={"message": "hi"}).status_code == 400
        assert client.post("/chat", json={"restaurantId": "r1"}).status_code == 400

    def test_unknown_restaurant(self, client: TestClient):
        assert client.post("/chat", json={"restaurantId": "nope", "message": "hi"}).status_code == 404

    def test_reply(self, client: TestClient, store, fake_llm):
        asyncio.run(store.upsert("r1", {"name": "Luigi's"}))
        fake_llm.replies.append("We open at 11.")

        response = client.post("/chat", json={
            "restaurantId": "r1",
            "message": "When do you open?",
            "history": [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "Hello!"}],
        })

        assert response.status_code == 200
        assert response.json() == {"reply": "We open at 11."}
        assert fake_llm.calls[0][-1] == {"role": "user", "content": "When do you open?"}

    def test_llm_failure_is_still_a_reply(self, client: TestClient, store, fake_llm):
        asyncio.run(store.upsert("r1", {"phone": "555-0100"}))
        fake_llm.replies.append(LLMClientError("upstream 500"))

        response = client.post("/chat", json={"restaurantId": "r1", "message": "Hours?"})

        assert response.status_code == 200
        assert response.json()["reply"] == f"{FALLBACK_MESSAGE} You can call us at 555-0100."


class TestImports:
    def test_import_from_url_preview(self, client: TestClient, store, fake_importer):
        fake_importer.results["menu"] = [{"category": "Pizza", "items": []}]

        response = client.post("/import-from-url", json={"restaurantId": "r1", "url": "https://example.com"})

        assert response.status_code == 200
        assert response.json() == {"menu": [{"category": "Pizza", "items": []}]}
        assert store.get("r1") is None

    def test_import_from_url_missing_fields(self, client: TestClient):
        assert client.post("/import-from-url", json={"restaurantId": "r1"}).status_code == 400

    def test_import_failure_is_502(self, client: TestClient, fake_importer):
        fake_importer.results["offers"] = ExtractionError("invalid JSON")

        response = client.post(
            "/import-from-url", json={"restaurantId": "r1", "url": "https://example.com", "kind": "offers"}
        )

        assert response.status_code == 502
        assert "Failed to import offers from URL" in response.json()["detail"]

    def test_import_from_text(self, client: TestClient, fake_importer):
        fake_importer.results["offers"] = [{"title": "Taco Tuesday"}]

        response = client.post(
            "/import-from-text", json={"restaurantId": "r1", "text": "Tacos $2 every Tuesday!", "kind": "offers"}
        )

        assert response.json() == {"offers": [{"title": "Taco Tuesday"}]}
        assert fake_importer.calls == [("text", "offers", "Tacos $2 every Tuesday!")]

    def test_import_from_image(self, client: TestClient, fake_importer):
        fake_importer.results["menu"] = [{"category": "Sides", "items": []}]

        response = client.post(
            "/import-from-image",
            data={"restaurantId": "r1"},
            files={"image": ("menu.png", png_bytes(), "image/png")},
        )

        assert response.status_code == 200
        assert response.json() == {"menu": [{"category": "Sides", "items": []}]}
        assert fake_importer.calls[0][2].startswith("data:image/jpeg;base64,")

    def test_import_from_image_requires_image(self, client: TestClient):
        response = client.post("/import-from-image", data={"restaurantId": "r1"})
        assert response.status_code == 400

    def test_import_from_image_rejects_non_images(self, client: TestClient):
        response = client.post(
            "/import-from-image",
            data={"restaurantId": "r1"},
            files={"image": ("menu.png", b"not an image", "image/png")},
        )
        assert response.status_code == 400

    def test_rescan(self, client: TestClient, store, fake_importer):
        asyncio.run(store.upsert("r1", {"menuSourceUrl": "https://r1/menu", "menu": [{"category": "Old", "items": []}]}))
        fake_importer.results["menu"] = [{"category": "New", "items": []}]

        response = client.post("/rescan")

        assert response.status_code == 200
        assert response.json() == {"results": [{"id": "r1", "updated": True}]}
        assert store.get("r1")["menu"] == [{"category": "New", "items": []}]

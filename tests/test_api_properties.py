"""HTTP tests for the property and info routes."""

from conftest import COLLECTION

BASE = "/api/properties"

NEW_LISTING = {
    "title": "Spacious 2 Bedroom Apt in Kilimani",
    "description": "Modern apartment with great views and amenities.",
    "location": "Kilimani, Nairobi",
    "price": 75000,
    "bedrooms": 2,
    "bathrooms": 2,
    "area": 120,
    "amenities": ["Parking", "Swimming Pool", "Gym"],
    "phoneNumber": "+254700000000",
}


def create(client, **overrides):
    response = client.post(BASE, json={**NEW_LISTING, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["property"]


class TestCreateProperty:
    def test_created(self, client, store) -> None:
        response = client.post(BASE, json=NEW_LISTING)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Property listed successfully"
        assert body["propertyId"] == body["property"]["id"]
        assert body["property"]["phoneNumber"] == "+254700000000"
        assert store.get(COLLECTION, body["propertyId"])["price"] == 75000

    def test_images_are_not_stored(self, client, store) -> None:
        prop = create(client, images=["data:image/png;base64,AAAA"])
        assert prop["images"] == []
        assert store.get(COLLECTION, prop["id"])["images"] == []

    def test_zero_and_negative_price_rejected(self, client) -> None:
        for price in (0, -1, "0"):
            response = client.post(BASE, json={**NEW_LISTING, "price": price})
            assert response.status_code == 400
            assert "price" in response.json()["message"]

    def test_price_of_one_accepted(self, client) -> None:
        assert create(client, price=1)["price"] == 1

    def test_price_beyond_float_range_rejected(self, client, store) -> None:
        response = client.post(BASE, json={**NEW_LISTING, "price": 10**400})
        assert response.status_code == 400
        assert "price" in response.json()["message"]
        assert store.query(COLLECTION, []) == []

    def test_missing_title_rejected(self, client) -> None:
        payload = {key: value for key, value in NEW_LISTING.items() if key != "title"}
        assert client.post(BASE, json=payload).status_code == 400

    def test_malformed_json(self, client) -> None:
        response = client.post(BASE, content=b"{not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid JSON payload"}

    def test_non_object_body(self, client) -> None:
        response = client.post(BASE, json=[NEW_LISTING])
        assert response.status_code == 400

    def test_unset_optionals_are_omitted(self, client) -> None:
        prop = create(client, area="", phoneNumber="")
        assert "area" not in prop
        assert "phoneNumber" not in prop


class TestGetProperty:
    def test_found(self, client) -> None:
        prop = create(client)
        response = client.get(f"{BASE}/{prop['id']}")
        assert response.status_code == 200
        assert response.json() == prop

    def test_not_found(self, client) -> None:
        response = client.get(f"{BASE}/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"message": "Property with ID does-not-exist not found."}


class TestUpdateProperty:
    def test_sparse_update(self, client) -> None:
        prop = create(client)
        response = client.put(f"{BASE}/{prop['id']}", json={"description": "new text"})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Property updated successfully"
        assert body["propertyId"] == prop["id"]
        assert body["property"] == {**prop, "description": "new text"}

    def test_empty_area_removes_field(self, client, store) -> None:
        prop = create(client)
        response = client.put(f"{BASE}/{prop['id']}", json={"area": ""})
        assert response.status_code == 200
        assert "area" not in response.json()["property"]
        assert "area" not in store.get(COLLECTION, prop["id"])

    def test_invalid_price(self, client) -> None:
        prop = create(client)
        response = client.put(f"{BASE}/{prop['id']}", json={"price": 0})
        assert response.status_code == 400
        assert client.get(f"{BASE}/{prop['id']}").json()["price"] == 75000

    def test_price_beyond_float_range(self, client) -> None:
        prop = create(client)
        response = client.put(f"{BASE}/{prop['id']}", json={"price": 10**400})
        assert response.status_code == 400
        assert client.get(f"{BASE}/{prop['id']}").json()["price"] == 75000

    def test_no_valid_fields(self, client) -> None:
        prop = create(client)
        response = client.put(f"{BASE}/{prop['id']}", json={})
        assert response.status_code == 400
        assert response.json() == {"message": "No valid fields provided for update."}

    def test_not_found(self, client) -> None:
        response = client.put(f"{BASE}/missing", json={"description": "x"})
        assert response.status_code == 404

    def test_malformed_json(self, client) -> None:
        prop = create(client)
        response = client.put(f"{BASE}/{prop['id']}", content=b"", headers={"Content-Type": "application/json"})
        assert response.status_code == 400


class TestDeleteProperty:
    def test_deleted(self, client) -> None:
        prop = create(client)
        response = client.delete(f"{BASE}/{prop['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Property deleted successfully", "propertyId": prop["id"]}
        assert client.get(f"{BASE}/{prop['id']}").status_code == 404

    def test_not_found(self, client) -> None:
        response = client.delete(f"{BASE}/missing")
        assert response.status_code == 404
        assert response.json()["message"] == "Property with ID missing not found."

    def test_image_cleanup_failure_is_absorbed(self, client, store, image_storage) -> None:
        url = "gs://demo.appspot.com/properties/broken.jpg"
        image_storage.failing.add("properties/broken.jpg")
        doc_id = store.add(COLLECTION, {"title": "T", "price": 1, "location": "L", "images": [url]})
        assert client.delete(f"{BASE}/{doc_id}").status_code == 200
        assert store.get(COLLECTION, doc_id) is None


class TestListProperties:
    def test_all(self, client, seeded) -> None:
        response = client.get(BASE)
        assert response.status_code == 200
        assert len(response.json()) == len(seeded)

    def test_price_range_ordered_by_price(self, client, seeded) -> None:
        response = client.get(BASE, params={"minPrice": 50000, "maxPrice": 100000})
        prices = [prop["price"] for prop in response.json()]
        assert prices == [60000, 75000]

    def test_amenities_superset(self, client, seeded) -> None:
        response = client.get(BASE, params=[("amenities", "Parking"), ("amenities", "Gym")])
        body = response.json()
        assert {prop["title"] for prop in body} == {
            "Spacious 2 Bedroom Apt in Kilimani",
            "Modern 1 Bedroom in Westlands",
        }

    def test_free_text(self, client, seeded) -> None:
        body = client.get(BASE, params={"q": "kilimani"}).json()
        assert len(body) == 2
        for prop in body:
            assert "kilimani" in prop["location"].lower() or "kilimani" in prop["title"].lower()

    def test_all_bedrooms_is_ignored(self, client, seeded) -> None:
        body = client.get(BASE, params={"minBedrooms": "all", "minBathrooms": "all"}).json()
        assert len(body) == len(seeded)

    def test_min_bathrooms(self, client, seeded) -> None:
        body = client.get(BASE, params={"minBathrooms": "3"}).json()
        assert sorted(prop["title"] for prop in body) == ["Beachfront Villa in Nyali", "Family Home in Lavington"]

    def test_invalid_numbers_are_ignored(self, client, seeded) -> None:
        body = client.get(BASE, params={"minPrice": "cheap"}).json()
        assert len(body) == len(seeded)


class TestStoreUnavailable:
    def test_routes_answer_500(self, unavailable_client) -> None:
        for method, path in (("get", BASE), ("get", f"{BASE}/x"), ("delete", f"{BASE}/x")):
            response = getattr(unavailable_client, method)(path)
            assert response.status_code == 500
            assert response.json() == {"message": "Firestore is not initialized. Check server logs."}

    def test_create_answers_500(self, unavailable_client) -> None:
        response = unavailable_client.post(BASE, json=NEW_LISTING)
        assert response.status_code == 500


class TestInfo:
    def test_info(self, unavailable_client) -> None:
        body = unavailable_client.get("/api/info").json()
        assert body["store"] == "not initialized"
        assert "Parking" in body["amenities"]

    def test_geocode_placeholder(self, client) -> None:
        response = client.get("/api/geocode", params={"location": "Kilimani"})
        assert response.status_code == 200
        assert response.json() == {"lat": -1.286389, "lng": 36.817223}

    def test_geocode_requires_location(self, client) -> None:
        assert client.get("/api/geocode").status_code == 400

"""
Tests for the genre and health endpoints.
"""

import pytest

from app.services.errors import StorageError


class TestGenres:

    def test_create_and_list(self, client):
        response = client.post("/genre", json={"name": "horror"})

        assert response.status_code == 201
        assert response.content == b""
        assert client.get("/genres").json() == ["horror"]

    def test_empty_list(self, client):
        response = client.get("/genres")

        assert response.status_code == 200
        assert response.json() == []

    def test_duplicate_is_rejected(self, client):
        client.post("/genre", json={"name": "horror"})

        response = client.post("/genre", json={"name": "horror"})

        assert response.status_code == 400
        assert response.json() == {"detail": "genre 'horror' already exists"}
        assert client.get("/genres").json() == ["horror"]

    def test_names_are_case_sensitive(self, client):
        client.post("/genre", json={"name": "horror"})

        assert client.post("/genre", json={"name": "Horror"}).status_code == 201

    @pytest.mark.parametrize("body", [{"name": ""}, {}])
    def test_name_is_required(self, client, body):
        response = client.post("/genre", json=body)

        assert response.status_code == 400
        assert response.json() == {"detail": "'name' is required"}

    def test_unparseable_body(self, client):
        response = client.post("/genre", content="[]", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"detail": "unable to parse the request"}


class TestDeleteGenre:

    def test_delete(self, client, repository):
        client.post("/genre", json={"name": "horror"})
        client.post("/genre", json={"name": "scifi"})

        response = client.delete(f"/genre/{repository.genre_id_by_name('horror')}")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get("/genres").json() == ["scifi"]

    def test_delete_by_uppercase_id(self, client, repository):
        client.post("/genre", json={"name": "horror"})

        response = client.delete(f"/genre/{repository.genre_id_by_name('horror').upper()}")

        assert response.status_code == 204
        assert client.get("/genres").json() == []

    @pytest.mark.parametrize("genre_id", ["horror", "00000000-0000-0000-0000-000000000000"])
    def test_unknown_genre(self, client, genre_id):
        response = client.delete(f"/genre/{genre_id}")

        assert response.status_code == 404
        assert response.json() == {"detail": "genre not found"}

    def test_deleting_twice(self, client, repository):
        client.post("/genre", json={"name": "horror"})
        genre_id = repository.genre_id_by_name("horror")

        assert client.delete(f"/genre/{genre_id}").status_code == 204
        assert client.delete(f"/genre/{genre_id}").status_code == 404

    def test_genre_used_by_a_book_is_kept(self, client, repository):
        client.post("/genre", json={"name": "horror"})
        book = client.post(
            "/book",
            json={"title": "Carrie", "author": "Stephen King", "genres": ["horror"], "price": 9.99},
        ).json()

        response = client.delete(f"/genre/{repository.genre_id_by_name('horror')}")

        assert response.status_code == 409
        assert response.json() == {"detail": "genre is still referenced by books"}
        assert client.get(f"/book/{book['id']}").json()["genres"] == ["horror"]
        assert client.get("/genres").json() == ["horror"]

    def test_storage_failure(self, client, repository):
        repository.fail_with = StorageError("connection lost")

        response = client.delete("/genre/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 500
        assert response.json() == {"detail": "oops something went wrong"}


class TestHealth:

    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.text == "ok"

    def test_storage_health(self, client):
        client.post("/genre", json={"name": "horror"})

        response = client.get("/health/db")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "connected"
        assert body["database"]["backend"] == "memory"
        assert body["database"]["counts"] == {"books": 0, "genres": 1}

    def test_storage_unavailable(self, client, repository):
        repository.fail_with = StorageError("connection lost")

        response = client.get("/health/db")

        assert response.status_code == 503
        assert response.json() == {"status": "error", "type": "StorageError"}

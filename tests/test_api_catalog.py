from unittest.mock import patch

import pytest


@pytest.fixture
def create_genre(client, editor_headers):
    def _create(name):
        response = client.post("/api/genres", json={"name": name}, headers=editor_headers)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _create


@pytest.fixture
def create_star(client, editor_headers):
    def _create(first_name, last_name="Doe"):
        response = client.post(
            "/api/stars",
            json={"first_name": first_name, "last_name": last_name, "birth_date": "1970-01-01"},
            headers=editor_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _create


@pytest.fixture
def create_movie(client, editor_headers):
    def _create(title, genre_ids=(), cast=(), description=""):
        response = client.post(
            "/api/movies",
            json={
                "title": title,
                "release_date": "2000-01-01",
                "description": description,
                "genre_ids": list(genre_ids),
                "cast": list(cast),
            },
            headers=editor_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


class TestGenres:
    def test_crud(self, client, editor_headers, create_genre):
        genre_id = create_genre("Drama")
        assert client.get(f"/api/genres/{genre_id}").json() == {"id": genre_id, "name": "Drama"}

        response = client.put(f"/api/genres/{genre_id}", json={"name": "Thriller"}, headers=editor_headers)
        assert response.status_code == 200
        assert [g["name"] for g in client.get("/api/genres").json()] == ["Thriller"]

        assert client.delete(f"/api/genres/{genre_id}", headers=editor_headers).status_code == 200
        assert client.get(f"/api/genres/{genre_id}").status_code == 404

    def test_name_is_case_sensitive_unique(self, client, editor_headers, create_genre):
        create_genre("Drama")
        create_genre("drama")
        response = client.post("/api/genres", json={"name": "Drama"}, headers=editor_headers)
        assert response.status_code == 409
        assert response.json() == {"message": "genre with name 'Drama' already exists"}

    def test_name_length(self, client, editor_headers):
        assert client.post("/api/genres", json={"name": "ab"}, headers=editor_headers).status_code == 400
        assert client.post("/api/genres", json={"name": "x" * 33}, headers=editor_headers).status_code == 400

    def test_requires_editor(self, client, make_user):
        _, headers = make_user("johndoe")
        assert client.post("/api/genres", json={"name": "Drama"}, headers=headers).status_code == 403
        assert client.post("/api/genres", json={"name": "Drama"}).status_code == 401

    def test_update_missing(self, client, editor_headers):
        response = client.put("/api/genres/99", json={"name": "Drama"}, headers=editor_headers)
        assert response.status_code == 404

    def test_unexpected_error_becomes_internal_response(self, client, services):
        with patch.object(services.genres, "get_genres", side_effect=RuntimeError("boom")), \
                patch("movie_reviews.main.logger") as logger:
            response = client.get("/api/genres")
        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "internal server error"
        assert "boom" not in response.text
        assert body["incidentId"]
        # 한 번만 기록되고 incident id가 로그와 응답에서 같음
        logger.error.assert_called_once()
        assert body["incidentId"] in logger.error.call_args[0][0]


class TestStars:
    def test_crud(self, client, editor_headers, create_star):
        star_id = create_star("Tom", "Hanks")
        body = client.get(f"/api/stars/{star_id}").json()
        assert body["first_name"] == "Tom"
        assert body["birth_date"] == "1970-01-01"

        response = client.put(
            f"/api/stars/{star_id}",
            json={"first_name": "Tom", "last_name": "Hanks", "birth_date": "1956-07-09", "bio": "actor"},
            headers=editor_headers,
        )
        assert response.status_code == 200
        assert client.get(f"/api/stars/{star_id}").json()["bio"] == "actor"

        assert client.delete(f"/api/stars/{star_id}", headers=editor_headers).status_code == 200
        assert client.get(f"/api/stars/{star_id}").status_code == 404
        assert client.delete(f"/api/stars/{star_id}", headers=editor_headers).status_code == 404

    def test_pagination_and_movie_filter(self, client, create_star, create_movie):
        ids = [create_star(name) for name in ("Ann", "Bob", "Cid")]
        page = client.get("/api/stars").json()
        assert page["page"] == 1
        assert page["size"] == 2
        assert page["total"] == 3
        assert [s["id"] for s in page["items"]] == ids[:2]

        page = client.get("/api/stars", params={"page": 2}).json()
        assert [s["id"] for s in page["items"]] == ids[2:]

        movie = create_movie(
            "Heat",
            cast=[
                {"star_id": ids[1], "role": "actor"},
                {"star_id": ids[1], "role": "director"},
            ],
        )
        page = client.get("/api/stars", params={"movieId": movie["id"]}).json()
        assert page["total"] == 1
        assert [s["id"] for s in page["items"]] == [ids[1]]

    def test_size_is_capped(self, client):
        page = client.get("/api/stars", params={"size": 50}).json()
        assert page["size"] == 5


class TestMovies:
    def test_create_returns_assembled_movie(self, create_genre, create_star, create_movie):
        drama, comedy = create_genre("Drama"), create_genre("Comedy")
        star_id = create_star("Tom", "Hanks")
        movie = create_movie(
            "Big",
            genre_ids=[comedy, drama],
            cast=[{"star_id": star_id, "role": "actor", "details": "Josh"}],
        )
        assert movie["version"] == 0
        assert movie["avg_rating"] is None
        assert [g["name"] for g in movie["genres"]] == ["Comedy", "Drama"]
        assert movie["cast"][0]["star"]["id"] == star_id
        assert movie["cast"][0]["details"] == "Josh"

    def test_unknown_genre(self, client, editor_headers):
        response = client.post(
            "/api/movies",
            json={"title": "Big", "release_date": "1988-06-03", "genre_ids": [42]},
            headers=editor_headers,
        )
        assert response.status_code == 404
        assert response.json() == {"message": "genre with id '42' not found"}

    def test_three_movies_two_per_page(self, client, create_movie):
        ids = [create_movie(title)["id"] for title in ("A", "B", "C")]
        first = client.get("/api/movies", params={"page": 1, "size": 2}).json()
        second = client.get("/api/movies", params={"page": 2, "size": 2}).json()
        assert first["total"] == second["total"] == 3
        assert [m["id"] for m in first["items"]] == ids[:2]
        assert [m["id"] for m in second["items"]] == ids[2:]

    def test_update_with_version(self, client, editor_headers, create_genre, create_movie):
        g1, g2 = create_genre("Drama"), create_genre("Comedy")
        movie = create_movie("Big", genre_ids=[g1, g2])
        payload = {"title": "Big", "release_date": "1988-06-03", "genre_ids": [g2, g1], "version": 0}

        response = client.put(f"/api/movies/{movie['id']}", json=payload, headers=editor_headers)
        assert response.status_code == 200
        updated = client.get(f"/api/movies/{movie['id']}").json()
        assert updated["version"] == 1
        assert [g["id"] for g in updated["genres"]] == [g2, g1]

        # 같은 version으로 다시 보내면 충돌
        response = client.put(f"/api/movies/{movie['id']}", json=payload, headers=editor_headers)
        assert response.status_code == 409
        assert response.json() == {"message": f"movie with id '{movie['id']}' and version 0 not found"}

    def test_update_missing_movie(self, client, editor_headers):
        payload = {"title": "Big", "release_date": "1988-06-03", "version": 0}
        response = client.put("/api/movies/999", json=payload, headers=editor_headers)
        assert response.status_code == 404

    def test_negative_version_is_rejected(self, client, editor_headers, create_movie):
        movie = create_movie("Big")
        payload = {"title": "Big", "release_date": "1988-06-03", "version": -1}
        response = client.put(f"/api/movies/{movie['id']}", json=payload, headers=editor_headers)
        assert response.status_code == 400

    def test_delete(self, client, editor_headers, create_movie):
        movie = create_movie("Big")
        assert client.delete(f"/api/movies/{movie['id']}", headers=editor_headers).status_code == 200
        assert client.get(f"/api/movies/{movie['id']}").status_code == 404
        assert client.get("/api/movies").json()["total"] == 0

    def test_search_and_star_filter(self, client, create_star, create_movie):
        star_id = create_star("Tom", "Hanks")
        big = create_movie("Big", description="a boy becomes a man", cast=[{"star_id": star_id, "role": "actor"}])
        create_movie("Heat", description="cops and robbers")

        page = client.get("/api/movies", params={"q": "boy"}).json()
        assert [m["id"] for m in page["items"]] == [big["id"]]

        page = client.get("/api/movies", params={"starId": star_id}).json()
        assert [m["id"] for m in page["items"]] == [big["id"]]

    def test_invalid_sort(self, client):
        assert client.get("/api/movies", params={"sortByRating": "up"}).status_code == 400

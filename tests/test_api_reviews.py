import pytest


@pytest.fixture
def movie_id(client, editor_headers):
    response = client.post(
        "/api/movies",
        json={"title": "Big", "release_date": "1988-06-03"},
        headers=editor_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def _review(movie_id, rating, title="Nice"):
    return {"movie_id": movie_id, "title": title, "content": "Loved it", "rating": rating}


class TestReviews:
    def test_create_updates_movie_rating(self, client, make_user, movie_id):
        alice_id, alice = make_user("alice1")
        bob_id, bob = make_user("bobby1")

        response = client.post(f"/api/users/{alice_id}/reviews", json=_review(movie_id, 4), headers=alice)
        assert response.status_code == 201
        review = response.json()
        assert review["user_id"] == alice_id
        assert review["movie_id"] == movie_id

        client.post(f"/api/users/{bob_id}/reviews", json=_review(movie_id, 9), headers=bob)
        assert client.get(f"/api/movies/{movie_id}").json()["avg_rating"] == pytest.approx(6.5)

        response = client.put(
            f"/api/users/{alice_id}/reviews/{review['id']}",
            json={"title": "Meh", "content": "Changed my mind", "rating": 1},
            headers=alice,
        )
        assert response.status_code == 200
        assert client.get(f"/api/reviews/{review['id']}").json()["rating"] == 1
        assert client.get(f"/api/movies/{movie_id}").json()["avg_rating"] == pytest.approx(5)

        response = client.delete(f"/api/users/{alice_id}/reviews/{review['id']}", headers=alice)
        assert response.status_code == 200
        assert client.get(f"/api/reviews/{review['id']}").status_code == 404
        assert client.get(f"/api/movies/{movie_id}").json()["avg_rating"] == pytest.approx(9)

    def test_second_review_conflicts(self, client, make_user, movie_id):
        alice_id, alice = make_user("alice1")
        client.post(f"/api/users/{alice_id}/reviews", json=_review(movie_id, 4), headers=alice)
        response = client.post(f"/api/users/{alice_id}/reviews", json=_review(movie_id, 5), headers=alice)
        assert response.status_code == 409
        assert response.json() == {
            "message": f"review with (movie_id,user_id) '({movie_id},{alice_id})' already exists"
        }

    def test_rating_range(self, client, make_user, movie_id):
        alice_id, alice = make_user("alice1")
        for rating in (0, 11):
            response = client.post(f"/api/users/{alice_id}/reviews", json=_review(movie_id, rating), headers=alice)
            assert response.status_code == 400

    def test_review_for_missing_movie(self, client, make_user):
        alice_id, alice = make_user("alice1")
        response = client.post(f"/api/users/{alice_id}/reviews", json=_review(999, 5), headers=alice)
        assert response.status_code == 404
        assert response.json() == {"message": "movie with id '999' not found"}

    def test_cannot_post_as_someone_else(self, client, make_user, movie_id):
        alice_id, _ = make_user("alice1")
        _, bob = make_user("bobby1")
        response = client.post(f"/api/users/{alice_id}/reviews", json=_review(movie_id, 5), headers=bob)
        assert response.status_code == 403

    def test_editing_review_of_other_user(self, client, make_user, movie_id):
        alice_id, alice = make_user("alice1")
        bob_id, bob = make_user("bobby1")
        review_id = client.post(
            f"/api/users/{alice_id}/reviews", json=_review(movie_id, 5), headers=alice
        ).json()["id"]

        # bob이 자신의 경로로 alice의 리뷰를 수정하려는 경우
        response = client.put(
            f"/api/users/{bob_id}/reviews/{review_id}",
            json={"title": "x", "content": "y", "rating": 1},
            headers=bob,
        )
        assert response.status_code == 403
        assert response.json() == {
            "message": f"review with id {review_id} is not owned by user with id {alice_id}"
        }

    def test_admin_can_delete_for_user(self, client, make_user, admin_headers, movie_id):
        alice_id, alice = make_user("alice1")
        review_id = client.post(
            f"/api/users/{alice_id}/reviews", json=_review(movie_id, 5), headers=alice
        ).json()["id"]
        response = client.delete(f"/api/users/{alice_id}/reviews/{review_id}", headers=admin_headers)
        assert response.status_code == 200
        assert client.get(f"/api/movies/{movie_id}").json()["avg_rating"] is None

    def test_list_requires_filter(self, client):
        response = client.get("/api/reviews")
        assert response.status_code == 400
        assert response.json() == {"message": "either movie_id or user_id must be provided"}

    def test_list_by_movie_and_user(self, client, make_user, movie_id):
        ids = []
        for name in ("alice1", "bobby1", "carol1"):
            user_id, headers = make_user(name)
            client.post(f"/api/users/{user_id}/reviews", json=_review(movie_id, 7), headers=headers)
            ids.append(user_id)

        page = client.get("/api/reviews", params={"movieId": movie_id}).json()
        assert page["total"] == 3
        assert len(page["items"]) == 2

        page = client.get("/api/reviews", params={"userId": ids[0]}).json()
        assert page["total"] == 1
        assert page["items"][0]["user_id"] == ids[0]

    def test_deleted_movie_rejects_reviews(self, client, make_user, editor_headers, movie_id):
        alice_id, alice = make_user("alice1")
        client.delete(f"/api/movies/{movie_id}", headers=editor_headers)
        response = client.post(f"/api/users/{alice_id}/reviews", json=_review(movie_id, 5), headers=alice)
        assert response.status_code == 404

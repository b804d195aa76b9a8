"""
Six Cities Backend — Comment Endpoint Tests
=============================================
"""

import pytest

from sixcities.schemas.comment import CreateCommentDto

from conftest import COMMENT_ID, MISSING_ID, OFFER_ID, USER_ID


class TestListComments:
    @pytest.mark.asyncio
    async def test_list(self, test_client, services, sample_offer, sample_comment):
        services.offer_service.find_by_id.return_value = sample_offer
        services.comment_service.find_by_offer_id.return_value = [sample_comment]

        response = await test_client.get(f"/comments/{OFFER_ID}")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["id"] == COMMENT_ID
        assert body[0]["author"]["name"] == "Keks"
        assert "createdAt" in body[0]
        services.comment_service.find_by_offer_id.assert_awaited_once_with(OFFER_ID)

    @pytest.mark.asyncio
    async def test_unknown_offer(self, test_client, services):
        services.offer_service.find_by_id.return_value = None

        response = await test_client.get(f"/comments/{MISSING_ID}")

        assert response.status_code == 404
        assert response.json()["message"] == f"Offer with {MISSING_ID} not found."
        services.comment_service.find_by_offer_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_offer_id(self, test_client, services):
        response = await test_client.get("/comments/not-an-id")

        assert response.status_code == 400
        services.offer_service.find_by_id.assert_not_awaited()


class TestCreateComment:
    @pytest.mark.asyncio
    async def test_create_updates_rating(
        self, test_client, services, auth_headers, sample_offer, sample_comment
    ):
        services.offer_service.find_by_id.return_value = sample_offer
        services.comment_service.create.return_value = sample_comment

        response = await test_client.post(
            f"/comments/{OFFER_ID}",
            json={"text": "Lovely place, would stay again.", "rating": 5},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["rating"] == 5
        dto, offer_id, author_id = services.comment_service.create.await_args.args
        assert isinstance(dto, CreateCommentDto)
        assert (offer_id, author_id) == (OFFER_ID, USER_ID)
        services.offer_service.update_rating.assert_awaited_once_with(OFFER_ID)

    @pytest.mark.asyncio
    async def test_requires_credentials(self, test_client, services):
        response = await test_client.post(
            f"/comments/{OFFER_ID}", json={"text": "Lovely place.", "rating": 5}
        )

        assert response.status_code == 401
        services.comment_service.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_comment(self, test_client, services, auth_headers):
        response = await test_client.post(
            f"/comments/{OFFER_ID}", json={"text": "bad", "rating": 6}, headers=auth_headers
        )

        assert response.status_code == 400
        assert {d["field"] for d in response.json()["details"]} == {"text", "rating"}
        services.offer_service.find_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_offer(self, test_client, services, auth_headers):
        services.offer_service.find_by_id.return_value = None

        response = await test_client.post(
            f"/comments/{MISSING_ID}",
            json={"text": "Lovely place, would stay again.", "rating": 4},
            headers=auth_headers,
        )

        assert response.status_code == 404
        services.comment_service.create.assert_not_awaited()
        services.offer_service.update_rating.assert_not_awaited()

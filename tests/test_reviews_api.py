# =============================================================================
# tests/test_reviews_api.py - Review Endpoint Tests
# =============================================================================
# Form validation happens before the aggregator runs; these tests check the
# HTTP contract and that the stored cafe average follows each submission.
# =============================================================================

from __future__ import annotations

import asyncio

import pytest

REVIEW_TEXT = "Excellent cortado and the croissants are flaky."


async def _submit(client, cafe_id, **form):
    data = {"text": REVIEW_TEXT, **{k: str(v) for k, v in form.items()}}
    return await client.post(f"/cafes/{cafe_id}/reviews", data=data)


class TestSubmitReviewEndpoint:

    async def test_anonymous_rejected(self, client, cafe):
        response = await _submit(client, cafe.id, overall_rating=5)

        assert response.status_code == 401

    async def test_submit_returns_review_and_average(self, client, logged_in, cafe):
        response = await _submit(client, cafe.id, overall_rating=3.2, location_rating=4.5)

        assert response.status_code == 201
        body = response.json()
        assert body["average_rating"] == 3.0
        assert body["review"]["overall_rating"] == 3
        assert body["review"]["location_rating"] == 5
        assert body["review"]["price_rating"] == 0
        assert body["review"]["user_email"] == logged_in["email"]

    async def test_average_scenario(self, client, logged_in, cafe):
        for rating in (5, 4, 3):
            await _submit(client, cafe.id, overall_rating=rating)

        response = await _submit(client, cafe.id, overall_rating=4.6)

        assert response.json()["average_rating"] == 4.25
        detail = (await client.get(f"/cafes/{cafe.id}")).json()
        assert detail["average_rating"] == 4.25
        assert detail["ratings"]["overall"] == 4.25

    @pytest.mark.parametrize(
        "form",
        [
            {"overall_rating": 0},
            {"overall_rating": 5.5},
            {"overall_rating": 4, "coffee_rating": 6},
            {"overall_rating": 4, "price_rating": -1},
        ],
    )
    async def test_rating_bounds(self, client, logged_in, cafe, form):
        response = await _submit(client, cafe.id, **form)

        assert response.status_code == 422

    async def test_overall_rating_required(self, client, logged_in, cafe):
        response = await client.post(f"/cafes/{cafe.id}/reviews", data={"text": REVIEW_TEXT})

        assert response.status_code == 422

    @pytest.mark.parametrize("text", ["too short", "x" * 501])
    async def test_text_length(self, client, logged_in, cafe, text):
        response = await client.post(
            f"/cafes/{cafe.id}/reviews", data={"text": text, "overall_rating": "4"}
        )

        assert response.status_code == 422

    async def test_unknown_cafe(self, client, logged_in):
        response = await _submit(client, 999, overall_rating=4)

        assert response.status_code == 404
        assert response.json()["code"] == "CAFE_NOT_FOUND"

    async def test_concurrent_submissions(self, client, logged_in, cafe):
        responses = await asyncio.gather(
            *(_submit(client, cafe.id, overall_rating=r) for r in (5, 1, 3, 4))
        )

        assert all(r.status_code == 201 for r in responses)
        detail = (await client.get(f"/cafes/{cafe.id}")).json()
        assert detail["average_rating"] == pytest.approx(13 / 4)
        assert detail["ratings"]["review_count"] == 4


class TestListReviewsEndpoint:

    async def test_list(self, client, logged_in, cafe):
        await _submit(client, cafe.id, overall_rating=4)
        await _submit(client, cafe.id, overall_rating=2)

        response = await client.get(f"/cafes/{cafe.id}/reviews")

        assert response.status_code == 200
        reviews = response.json()
        assert [r["overall_rating"] for r in reviews] == [4, 2]
        assert all(r["user_email"] == logged_in["email"] for r in reviews)

    async def test_unknown_cafe(self, client):
        response = await client.get("/cafes/999/reviews")

        assert response.status_code == 404

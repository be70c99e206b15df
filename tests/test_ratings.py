# tests/test_ratings.py

import pytest

from barbershop.errors import NotFound
from barbershop.ratings import average_rating, record_review


@pytest.mark.parametrize("scores, expected", [
    ([], 0.0),
    ([5], 5.0),
    ([5, 4, 3], 4.0),
    ([4, 5], 4.5),
    ([5, 4, 4], 4.3),
    ([4, 4, 4, 5], 4.3),  # 4.25 rounds half up
    ([1, 2], 1.5),
    ([3, 3, 4, 4, 4, 4, 4, 4], 3.8),  # 3.75 rounds half up
])
def test_average_rating(scores, expected):
    assert average_rating(scores) == expected


def test_record_review_appends_review(store, shop):
    record_review(store, shop.barber.id, shop.client.id, 5, "sharp")
    record_review(store, shop.barber.id, shop.other_client.id, 3, None)

    reviews = store.list_reviews(shop.barber.id)
    assert [(r.client_id, r.text, r.score) for r in reviews] == [
        (shop.client.id, "sharp", 5),
        (shop.other_client.id, "", 3),
    ]


def test_record_review_unknown_barber(store, shop):
    with pytest.raises(NotFound):
        record_review(store, 9999, shop.client.id, 5, "")

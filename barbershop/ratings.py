# barbershop/ratings.py

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from barbershop.errors import NotFound
from barbershop.models import Review
from barbershop.store import AppointmentStore

logger = logging.getLogger(__name__)


def average_rating(scores: Sequence[int]) -> float:
    """Mean of ``scores`` rounded half-up to one decimal; 0.0 when empty."""
    if not scores:
        return 0.0
    mean = Decimal(sum(scores)) / Decimal(len(scores))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def record_review(
    store: AppointmentStore,
    barber_id: int,
    client_id: int,
    score: int,
    comment: Optional[str] = "",
    appointment_id: Optional[int] = None,
) -> float:
    """Append a review to the barber and recompute their rating.

    The rating is rebuilt from every rated, completed appointment of the
    barber rather than kept as a running mean.
    """
    barber = store.get_barber(barber_id)
    if barber is None:
        raise NotFound(f"Barber not found with id {barber_id}")

    store.add_review(
        Review(
            barber_id=barber_id,
            client_id=client_id,
            appointment_id=appointment_id,
            text=comment or "",
            score=score,
        )
    )

    barber.rating = average_rating(store.rated_scores(barber_id))
    store.save_barber(barber)
    logger.info("Barber %s rating is now %.1f", barber_id, barber.rating)
    return barber.rating

"""
Simulated fare estimation for Ola and Uber ride classes.

The rates are hypothetical; every quote is a straight line over distance:
``fare = base_fare + per_km * distance_km``.
"""

import logging
from typing import Dict, List, Tuple
from urllib.parse import quote

from schemas import FareBreakdown, FareQuote, Location

logger = logging.getLogger(__name__)

# Table order is the tie-break order for equal fares.
FARE_OPTIONS: Dict[str, Dict] = {
    "olaAuto": {"name": "Ola Auto", "per_km": 18, "base_fare": 11, "platform": "Ola"},
    "olaMini": {"name": "Ola Mini", "per_km": 25, "base_fare": 35, "platform": "Ola"},
    "olaPrime": {"name": "Ola Prime", "per_km": 28, "base_fare": 45, "platform": "Ola"},
    "uberAuto": {"name": "Uber Auto", "per_km": 14, "base_fare": 10, "platform": "Uber"},
    "uberGo": {"name": "Uber Go", "per_km": 22, "base_fare": 32, "platform": "Uber"},
    "uberPremier": {"name": "Uber Premier", "per_km": 30, "base_fare": 42, "platform": "Uber"},
}

BOOKING_URLS = {
    "Uber": "https://m.uber.com/ul/?action=setPickup&pickup={pickup}&dropoff={dropoff}",
    "Ola": "https://book.olacabs.com/?pickup={pickup}&dropoff={dropoff}",
}


def calculate_fares(distance_km: float) -> Tuple[List[FareQuote], FareQuote]:
    """Quote every ride option for ``distance_km``.

    Returns all quotes sorted by fare, cheapest first, and the cheapest one.
    The sort is stable, so options with identical fares keep table order.
    The caller is trusted to pass a finite, non-negative distance.
    """
    quotes: List[FareQuote] = []
    for option in FARE_OPTIONS.values():
        distance_cost = distance_km * option["per_km"]
        total = option["base_fare"] + distance_cost
        quotes.append(
            FareQuote(
                type=option["name"],
                fare=f"{round(total, 2):.2f}",
                breakdown=FareBreakdown(
                    base_fare=option["base_fare"],
                    distance_cost=round(distance_cost, 2),
                ),
                platform=option["platform"],
            )
        )

    quotes.sort(key=lambda q: float(q.fare))
    cheapest = quotes[0]
    logger.debug("Quoted %d options for %.2f km, cheapest %s at %s", len(quotes), distance_km, cheapest.type, cheapest.fare)
    return quotes, cheapest


def booking_url(platform: str, pickup: str, dropoff: str) -> str:
    if platform not in BOOKING_URLS:
        raise ValueError(f"Unknown platform: {platform}")
    return BOOKING_URLS[platform].format(pickup=quote(pickup, safe=""), dropoff=quote(dropoff, safe=""))


def attach_booking_urls(quotes: List[FareQuote], pickup: Location, dropoff: Location) -> None:
    for q in quotes:
        q.booking_url = booking_url(q.platform, pickup.name, dropoff.name)

"""Unit tests for the fare estimator and the fare endpoints."""

import json

import pytest

import locations
from fares import FARE_OPTIONS, attach_booking_urls, booking_url, calculate_fares
from schemas import Location


class TestCalculateFares:
    """Test the linear fare formula and the cheapest-first ordering."""

    @pytest.mark.parametrize("distance", [0, 0.5, 3.27, 10, 123.456])
    def test_every_fare_follows_formula(self, distance):
        quotes, _ = calculate_fares(distance)
        by_type = {q.type: q for q in quotes}

        assert len(quotes) == len(FARE_OPTIONS) == 6
        for option in FARE_OPTIONS.values():
            quote = by_type[option["name"]]
            expected = round(option["base_fare"] + option["per_km"] * distance, 2)
            assert quote.fare == f"{expected:.2f}"
            assert quote.breakdown.base_fare == option["base_fare"]
            assert quote.breakdown.distance_cost == round(option["per_km"] * distance, 2)

    def test_ten_km_example(self):
        quotes, cheapest = calculate_fares(10)
        by_type = {q.type: q.fare for q in quotes}

        assert by_type["Ola Auto"] == "191.00"
        assert by_type["Uber Auto"] == "150.00"
        assert by_type["Uber Premier"] == "342.00"
        assert cheapest.type == "Uber Auto"
        assert [q.type for q in quotes] == [
            "Uber Auto",
            "Ola Auto",
            "Uber Go",
            "Ola Mini",
            "Ola Prime",
            "Uber Premier",
        ]

    @pytest.mark.parametrize("distance", [0, 1, 2.5, 10, 42.42])
    def test_cheapest_is_minimum(self, distance):
        quotes, cheapest = calculate_fares(distance)
        assert cheapest is quotes[0]
        assert float(cheapest.fare) == min(float(q.fare) for q in quotes)
        assert [float(q.fare) for q in quotes] == sorted(float(q.fare) for q in quotes)

    def test_ties_keep_table_order(self):
        # At 1.5 km Ola Prime (45 + 28 * 1.5) and Uber Premier (42 + 30 * 1.5) both cost 87.00
        quotes, _ = calculate_fares(1.5)
        tail = [(q.type, q.fare) for q in quotes[-2:]]
        assert tail == [("Ola Prime", "87.00"), ("Uber Premier", "87.00")]

    def test_zero_distance_is_base_fare(self):
        quotes, cheapest = calculate_fares(0)
        assert cheapest.type == "Uber Auto"
        assert cheapest.fare == "10.00"
        assert all(q.breakdown.distance_cost == 0 for q in quotes)

    def test_platform_labels(self):
        quotes, _ = calculate_fares(5)
        for q in quotes:
            assert q.platform == ("Uber" if q.type.startswith("Uber") else "Ola")


class TestBookingLinks:
    """Test deep links into the ride platforms."""

    def test_uber_link_encodes_names(self):
        url = booking_url("Uber", "MG Road, Bengaluru", "Airport")
        assert url == "https://m.uber.com/ul/?action=setPickup&pickup=MG%20Road%2C%20Bengaluru&dropoff=Airport"

    def test_ola_link(self):
        url = booking_url("Ola", "A & B", "C/D")
        assert url == "https://book.olacabs.com/?pickup=A%20%26%20B&dropoff=C%2FD"

    def test_unknown_platform(self):
        with pytest.raises(ValueError):
            booking_url("Rapido", "a", "b")

    def test_attach_booking_urls(self, pickup, dropoff):
        quotes, _ = calculate_fares(3)
        attach_booking_urls(quotes, Location.model_validate(pickup), Location.model_validate(dropoff))
        for q in quotes:
            host = "m.uber.com" if q.platform == "Uber" else "book.olacabs.com"
            assert host in q.booking_url


class TestFareAPI:
    """Test the fare endpoints."""

    def test_estimate(self, client):
        response = client.post("/api/fares/estimate", json={"distanceKm": 10})
        assert response.status_code == 200
        data = response.json()
        assert len(data["allFares"]) == 6
        assert data["cheapest"]["type"] == "Uber Auto"
        assert data["cheapest"]["fare"] == "150.00"
        assert data["cheapest"]["breakdown"] == {"baseFare": 10, "distanceCost": 140}

    def test_estimate_rejects_negative_distance(self, client):
        response = client.post("/api/fares/estimate", json={"distanceKm": -1})
        assert response.status_code == 422

    @pytest.mark.parametrize("distance", [float("inf"), float("nan")])
    def test_estimate_rejects_non_finite_distance(self, client, distance):
        # the JSON decoder accepts Infinity / NaN literals
        response = client.post(
            "/api/fares/estimate",
            content=json.dumps({"distanceKm": distance}),
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

    def test_compare_uses_route_distance(self, client, monkeypatch, pickup, dropoff):
        calls = []

        def fake_distance(start, end):
            calls.append((start, end))
            return 10.0

        monkeypatch.setattr(locations, "route_distance_km", fake_distance)
        response = client.post("/api/fares/compare", json={"pickupLocation": pickup, "dropoffLocation": dropoff})

        assert response.status_code == 200
        data = response.json()
        assert data["distanceKm"] == 10.0
        assert data["cheapest"]["fare"] == "150.00"
        assert data["cheapest"]["bookingUrl"].startswith("https://m.uber.com/ul/")
        assert calls[0][0].lat == pickup["coordinates"]["lat"]

    def test_compare_upstream_failure(self, client, monkeypatch, pickup, dropoff):
        def boom(start, end):
            raise locations.UpstreamError("Routing error: timed out")

        monkeypatch.setattr(locations, "route_distance_km", boom)
        response = client.post("/api/fares/compare", json={"pickupLocation": pickup, "dropoffLocation": dropoff})
        assert response.status_code == 502
        assert "Routing error" in response.json()["detail"]

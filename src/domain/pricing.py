"""
Fare Pricing Engine  (Strategy Pattern)
=======================================

Formula
-------
Fare = max(Base_Fare + Distance x Rate_Per_KM + Duration x Rate_Per_Minute, Minimum_Fare)

rounded half-up to 2 decimal places.  Units are currency-neutral; the
deployment decides what currency they are quoted in.

Trip duration is not measured: when the caller has no estimate the
engine assumes ``default_duration_min`` (10 minutes).

Complexity: O(1) per quote.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .distance import distance_km as great_circle_km
from .entities import FareEstimate, GeoPoint
from .errors import InvalidArgument

CENTS = Decimal("0.01")
# enough digits to quantize any finite float to cents
QUANTIZE_PRECISION = 400
DEFAULT_DURATION_MIN = 10.0


@dataclass(frozen=True)
class Tariff:
    base_fare: float = 50.0
    rate_per_km: float = 15.0
    rate_per_minute: float = 3.0
    minimum_fare: float = 200.0


# ── Strategy hierarchy ────────────────────────────────────────────────


class PricingStrategy(ABC):
    @abstractmethod
    def calculate(
        self, distance_km: float, duration_min: float, tariff: Tariff
    ) -> Decimal: ...


class TariffPricing(PricingStrategy):
    """Linear base + distance + time model with a minimum-fare floor."""

    def calculate(
        self, distance_km: float, duration_min: float, tariff: Tariff
    ) -> Decimal:
        raw = (
            tariff.base_fare
            + distance_km * tariff.rate_per_km
            + duration_min * tariff.rate_per_minute
        )
        fare = max(raw, tariff.minimum_fare)
        if not math.isfinite(fare):
            raise InvalidArgument(f"Fare overflowed for distance {distance_km!r} km")
        with localcontext() as ctx:
            ctx.prec = QUANTIZE_PRECISION
            return Decimal(repr(fare)).quantize(CENTS, rounding=ROUND_HALF_UP)


# ── Engine facade ─────────────────────────────────────────────────────


def _check_non_negative(name: str, value: float) -> None:
    try:
        ok = math.isfinite(value) and value >= 0
    except TypeError as exc:
        raise InvalidArgument(f"{name} must be a number, got {value!r}") from exc
    if not ok:
        raise InvalidArgument(f"{name} must be a finite value >= 0, got {value!r}")


class PricingEngine:
    """High-level API used by the booking store and the API layer."""

    def __init__(
        self,
        tariff: Tariff | None = None,
        default_duration_min: float = DEFAULT_DURATION_MIN,
        strategy: PricingStrategy | None = None,
    ):
        self.tariff = tariff or Tariff()
        self.default_duration_min = default_duration_min
        self.strategy = strategy or TariffPricing()

    @staticmethod
    def distance(a: GeoPoint, b: GeoPoint) -> float:
        return great_circle_km(a, b)

    def estimate_fare(
        self, distance_km: float, duration_min: float | None = None
    ) -> FareEstimate:
        if duration_min is None:
            duration_min = self.default_duration_min
        _check_non_negative("distance_km", distance_km)
        _check_non_negative("duration_min", duration_min)
        fare = self.strategy.calculate(distance_km, duration_min, self.tariff)
        return FareEstimate(
            distance_km=distance_km, duration_min=duration_min, fare=fare
        )

    def quote(
        self, pickup: GeoPoint, dropoff: GeoPoint, duration_min: float | None = None
    ) -> FareEstimate:
        """Distance between the two points, priced with the tariff."""
        return self.estimate_fare(self.distance(pickup, dropoff), duration_min)


def estimate_fare(
    distance_km: float, duration_min: float = DEFAULT_DURATION_MIN
) -> FareEstimate:
    """Price a trip with the default tariff."""
    return PricingEngine().estimate_fare(distance_km, duration_min)

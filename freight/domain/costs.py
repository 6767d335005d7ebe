"""
Trip Cost Breakdown
===================

Helps a driver judge a bid before submitting it.

Formula
-------
Fuel       = Distance / Mileage x Fuel_Price
Toll       = Distance x Toll_Per_KM
Commission = Bid x Commission_Percent / 100
Net        = Bid - (Fuel + Toll + Commission)

Suggested opening bid = Budget x (1 + Markup), default markup 10 %.

Complexity: O(1) per call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .exceptions import ValidationError


@dataclass(frozen=True)
class CostBreakdown:
    bid_amount: float
    fuel_cost: float
    toll_cost: float
    commission: float

    @property
    def total_expense(self) -> float:
        return round(self.fuel_cost + self.toll_cost + self.commission, 2)

    @property
    def net(self) -> float:
        return round(self.bid_amount - self.total_expense, 2)


class TripCostCalculator:
    """High-level API used by the advisory mock and the API layer."""

    def __init__(
        self,
        fuel_price_per_liter: float = 95.5,
        mileage_km_per_liter: float = 8.0,
        toll_per_km: float = 2.5,
        commission_percent: float = 10.0,
        suggested_markup: float = 0.10,
    ):
        if mileage_km_per_liter <= 0:
            raise ValueError("mileage_km_per_liter must be positive")
        self.fuel_price_per_liter = fuel_price_per_liter
        self.mileage_km_per_liter = mileage_km_per_liter
        self.toll_per_km = toll_per_km
        self.commission_percent = commission_percent
        self.suggested_markup = suggested_markup

    @classmethod
    def from_settings(cls, settings) -> TripCostCalculator:
        return cls(
            fuel_price_per_liter=settings.fuel_price_per_liter,
            mileage_km_per_liter=settings.avg_mileage_km_per_liter,
            toll_per_km=settings.toll_avg_per_km,
            commission_percent=settings.platform_commission_percent,
            suggested_markup=settings.suggested_bid_markup,
        )

    def fuel_cost(self, distance_km: float) -> float:
        return round(distance_km / self.mileage_km_per_liter * self.fuel_price_per_liter, 2)

    def toll_cost(self, distance_km: float) -> float:
        return round(distance_km * self.toll_per_km, 2)

    def commission(self, bid_amount: float) -> float:
        return round(bid_amount * self.commission_percent / 100, 2)

    def breakdown(self, distance_km: float, bid_amount: float) -> CostBreakdown:
        if not math.isfinite(distance_km) or distance_km <= 0:
            raise ValidationError(f"distance_km must be positive, got {distance_km!r}")
        if not math.isfinite(bid_amount) or bid_amount <= 0:
            raise ValidationError(f"bid_amount must be positive, got {bid_amount!r}")
        return CostBreakdown(
            bid_amount=bid_amount,
            fuel_cost=self.fuel_cost(distance_km),
            toll_cost=self.toll_cost(distance_km),
            commission=self.commission(bid_amount),
        )

    def break_even_bid(self, distance_km: float) -> float:
        """Smallest bid whose net is zero once commission is taken."""
        running = self.fuel_cost(distance_km) + self.toll_cost(distance_km)
        return round(running / (1 - self.commission_percent / 100), 2)

    def suggested_bid(self, budget: float) -> float:
        return round(budget * (1 + self.suggested_markup), 2)

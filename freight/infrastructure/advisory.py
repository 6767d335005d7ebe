"""
Route / cost advisory providers.

Providers may raise; ``freight.services.advisory.AdvisoryService`` owns the
timeout and the user-safe fallback strings.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from openai import AsyncOpenAI

from freight.domain.costs import TripCostCalculator


class AdvisoryUpstreamError(RuntimeError):
    """Raised when the provider fails (network errors, service unavailable)."""


class AdvisoryProvider(ABC):
    @abstractmethod
    async def analyze(
        self, pickup: str, drop: str, distance_km: float, truck_type: str
    ) -> str:
        """Return plain-text commentary; empty string if nothing useful came back."""


def build_prompt(pickup: str, drop: str, distance_km: float, truck_type: str) -> str:
    return (
        "Act as a logistics expert for a trucking platform.\n"
        f'Analyze a trip from "{pickup}" to "{drop}" with a distance of '
        f"{distance_km}km using a {truck_type}.\n\n"
        "Provide a concise 3-sentence summary covering:\n"
        "1. Expected traffic or terrain challenges (highway vs city).\n"
        "2. Hidden costs to consider (tolls, wait times).\n"
        "3. A recommended competitive price range per km.\n\n"
        "Do not use markdown formatting. Keep it plain text."
    )


class MockAdvisor(AdvisoryProvider):
    """Deterministic commentary built from the cost constants; no network."""

    def __init__(self, calculator: TripCostCalculator):
        self.calculator = calculator

    async def analyze(
        self, pickup: str, drop: str, distance_km: float, truck_type: str
    ) -> str:
        terrain = "mostly highway driving" if distance_km >= 100 else "city traffic and frequent stops"
        fuel = self.calculator.fuel_cost(distance_km)
        toll = self.calculator.toll_cost(distance_km)
        floor = self.calculator.break_even_bid(distance_km)
        low = round(floor / distance_km, 1)
        high = round(low * 1.25, 1)
        return (
            f"The {distance_km:g} km run from {pickup} to {drop} in a {truck_type} "
            f"means {terrain}. "
            f"Budget roughly {fuel:.0f} for fuel and {toll:.0f} for tolls, plus "
            f"loading wait time at both ends. "
            f"A competitive price is {low}-{high} per km."
        )


class OpenAIAdvisor(AdvisoryProvider):
    def __init__(self, api_key: str, model: str, client: AsyncOpenAI | None = None):
        self.model = model
        self.client = client or AsyncOpenAI(api_key=api_key)

    async def analyze(
        self, pickup: str, drop: str, distance_km: float, truck_type: str
    ) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": build_prompt(pickup, drop, distance_km, truck_type),
                    }
                ],
            )
        except Exception as e:
            raise AdvisoryUpstreamError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()

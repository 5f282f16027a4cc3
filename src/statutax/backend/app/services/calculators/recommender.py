"""Pick the cheaper of two regimes and explain the choice."""

from __future__ import annotations

from dataclasses import dataclass

from statutax.backend.app.models import RecommendedRegime

SINGLE_REGIME_REASON = "Only one tax regime applies for this entity/region."
TIE_REASON = (
    "Both regimes result in the same tax liability; the New Regime is the "
    "statutory default and requires no declaration."
)


@dataclass(frozen=True)
class Recommendation:
    regime: RecommendedRegime
    reason: str


def recommend(old_tax: float, new_tax: float, has_dual_regime: bool) -> Recommendation:
    """Return the regime with the strictly lower tax.

    Ties resolve to the New Regime. When only one regime exists the numbers
    are ignored and ``N/A`` is returned.
    """

    if not has_dual_regime:
        return Recommendation(RecommendedRegime.NOT_APPLICABLE, SINGLE_REGIME_REASON)

    if old_tax < new_tax:
        regime = RecommendedRegime.OLD
    else:
        regime = RecommendedRegime.NEW

    if old_tax == new_tax:
        return Recommendation(regime, TIE_REASON)

    return Recommendation(
        regime,
        f"The {regime.value} Regime results in lower tax liability for your "
        "income and deduction profile.",
    )


__all__ = ["Recommendation", "SINGLE_REGIME_REASON", "TIE_REASON", "recommend"]

"""Unit tests for regime recommendations."""

from __future__ import annotations

from statutax.backend.app.models import RecommendedRegime
from statutax.backend.app.services.calculators.recommender import (
    SINGLE_REGIME_REASON,
    TIE_REASON,
    recommend,
)


def test_lower_old_tax_recommends_old() -> None:
    recommendation = recommend(10_000, 12_000, has_dual_regime=True)

    assert recommendation.regime is RecommendedRegime.OLD
    assert recommendation.reason == (
        "The Old Regime results in lower tax liability for your income and "
        "deduction profile."
    )


def test_lower_new_tax_recommends_new() -> None:
    recommendation = recommend(12_000, 10_000, has_dual_regime=True)

    assert recommendation.regime is RecommendedRegime.NEW
    assert "New Regime" in recommendation.reason


def test_equal_tax_breaks_tie_towards_new() -> None:
    recommendation = recommend(5_000, 5_000, has_dual_regime=True)

    assert recommendation.regime is RecommendedRegime.NEW
    assert recommendation.reason == TIE_REASON


def test_single_regime_ignores_amounts() -> None:
    recommendation = recommend(1, 999, has_dual_regime=False)

    assert recommendation.regime is RecommendedRegime.NOT_APPLICABLE
    assert recommendation.reason == SINGLE_REGIME_REASON

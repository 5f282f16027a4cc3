"""Exception taxonomy shared by the rule tables and calculators.

Every error derives from :class:`ValueError` so the Flask layer can keep a
single fallback handler for domain validation failures while still mapping
the specific subclasses to distinct problem codes.
"""

from __future__ import annotations


class StatutaxError(ValueError):
    """Base class for errors raised by the computation engine."""

    code = "engine_error"


class UnsupportedJurisdictionError(StatutaxError):
    """Raised when no rule table exists for a jurisdiction/entity/regime triple."""

    code = "unsupported_jurisdiction"

    def __init__(
        self,
        jurisdiction: object,
        entity_type: object | None = None,
        regime: object | None = None,
    ) -> None:
        parts = [str(_label(jurisdiction))]
        if entity_type is not None:
            parts.append(str(_label(entity_type)))
        if regime is not None:
            parts.append(str(_label(regime)))
        self.jurisdiction = jurisdiction
        self.entity_type = entity_type
        self.regime = regime
        super().__init__(f"No rule table available for {' / '.join(parts)}")


class InvalidInputError(StatutaxError):
    """Raised for negative or out-of-bound numeric inputs."""

    code = "validation_error"


class ComputationInvariantError(StatutaxError):
    """Raised when a computed figure breaks an internal invariant."""

    code = "invariant_violation"


def _label(value: object) -> object:
    return getattr(value, "value", value)


__all__ = [
    "ComputationInvariantError",
    "InvalidInputError",
    "StatutaxError",
    "UnsupportedJurisdictionError",
]

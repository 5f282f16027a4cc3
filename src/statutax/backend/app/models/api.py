"""Pydantic models describing the public API surface."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "CorporateTaxRequest",
    "DeductionProfile",
    "GstDirection",
    "GstRequest",
    "IncomeProfile",
    "PayrollRequest",
    "PersonalTaxRequest",
    "PortfolioCompanyInput",
    "PortfolioRequest",
    "SupplyType",
    "format_validation_error",
]


class GstDirection(str, Enum):
    """Whether the supplied amount already includes GST."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class SupplyType(str, Enum):
    """Place-of-supply classification driving the CGST/SGST/IGST split."""

    INTRA_STATE = "intra_state"
    INTER_STATE = "inter_state"


class IncomeProfile(BaseModel):
    """Income components in the jurisdiction's base currency unit.

    Sign checks belong to the calculators so that in-process callers get the
    same :class:`~statutax.backend.errors.InvalidInputError` as HTTP clients.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    salary: float = 0.0
    business_income: float = 0.0
    capital_gains: float = 0.0
    other_income: float = 0.0

    @property
    def gross_income(self) -> float:
        return self.salary + self.business_income + self.capital_gains + self.other_income


class DeductionProfile(BaseModel):
    """Itemised deductions claimed by the taxpayer before caps are applied."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    section_80c: float = 0.0
    section_80d: float = 0.0
    hra: float = 0.0
    other_deductions: float = 0.0


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid")

    fiscal_year: str | None = None

    @field_validator("fiscal_year", mode="before")
    @classmethod
    def _coerce_fiscal_year(cls, value: object) -> object:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class PersonalTaxRequest(_Request):
    """Payload for a personal income tax estimate."""

    jurisdiction: str
    income: IncomeProfile = Field(default_factory=IncomeProfile)
    deductions: DeductionProfile = Field(default_factory=DeductionProfile)


class CorporateTaxRequest(_Request):
    """Payload for a corporate tax estimate."""

    jurisdiction: str
    revenue: float = Field(default=0.0, ge=0)
    profit: float = Field(default=0.0, ge=0)
    passive_income_share: float = Field(default=0.0, ge=0, le=1)


class PayrollRequest(_Request):
    """Payload for a statutory payroll breakdown."""

    jurisdiction: str = "India"
    ctc: float = Field(..., gt=0)
    basic_pct: float
    hra_pct: float
    other_allowances: float = Field(default=0.0, ge=0)


class GstRequest(_Request):
    """Payload for a GST conversion."""

    jurisdiction: str = "India"
    amount: float = Field(..., ge=0)
    rate: float
    direction: GstDirection = GstDirection.EXCLUSIVE
    supply: SupplyType = SupplyType.INTRA_STATE


class PortfolioCompanyInput(BaseModel):
    """Financials for one client company in a portfolio batch."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    company_id: str = Field(..., min_length=1)
    name: str | None = None
    jurisdiction: str
    revenue: float = Field(default=0.0, ge=0)
    profit: float = Field(default=0.0, ge=0)
    passive_income_share: float = Field(default=0.0, ge=0, le=1)


class PortfolioRequest(_Request):
    """Payload for a batch of corporate estimates."""

    companies: list[PortfolioCompanyInput] = Field(..., min_length=1)


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"

"""Domain-specific calculation helpers."""

from .corporate import calculate_corporate_tax
from .gst import calculate_gst
from .payroll import calculate_payroll
from .personal import calculate_personal_tax, calculate_regime
from .recommender import Recommendation, recommend
from .utils import calculate_progressive_tax, effective_rate, surcharge_rate

__all__ = [
    "Recommendation",
    "calculate_corporate_tax",
    "calculate_gst",
    "calculate_payroll",
    "calculate_personal_tax",
    "calculate_progressive_tax",
    "calculate_regime",
    "effective_rate",
    "recommend",
    "surcharge_rate",
]

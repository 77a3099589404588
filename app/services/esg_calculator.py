from typing import Any, Dict

from app.schemas.esg import ESGMetrics
from app.services.coercion import to_number


# One precision per metric type, used by every output (JSON, CSV, PDF)
CARBON_INTENSITY_DECIMALS = 6
PERCENT_DECIMALS = 2

METHODOLOGY = {
    "carbon intensity": "Carbon emissions (T CO2e) / total revenue (INR).",
    "renewable electricity": "100 x renewable electricity (kWh) / total electricity (kWh).",
    "diversity": "100 x female employees / total employees.",
    "community investment": "100 x community investment (INR) / total revenue (INR).",
    "missing data": "A ratio is reported as 0 when its denominator is missing or zero.",
}


def safe_ratio(numerator: Any, denominator: Any, scale: float = 1.0) -> float:
    """
    scale * numerator / denominator, or exactly 0.0 when either side is
    missing or not a finite number, or when the denominator is zero.
    """
    num = to_number(numerator)
    den = to_number(denominator)
    if num is None or den is None or den == 0:
        return 0.0
    result = scale * num / den
    # Huge numerators over tiny denominators can still overflow
    if to_number(result) is None:
        return 0.0
    return result


def carbon_intensity(carbon_emissions_tco2e: Any, total_revenue_inr: Any) -> float:
    return safe_ratio(carbon_emissions_tco2e, total_revenue_inr)


def renewable_ratio(renewable_electricity_kwh: Any, total_electricity_kwh: Any) -> float:
    return safe_ratio(renewable_electricity_kwh, total_electricity_kwh, scale=100.0)


def diversity_ratio(female_employees: Any, total_employees: Any) -> float:
    return safe_ratio(female_employees, total_employees, scale=100.0)


def community_ratio(community_investment_inr: Any, total_revenue_inr: Any) -> float:
    return safe_ratio(community_investment_inr, total_revenue_inr, scale=100.0)


def calculate_esg_metrics(record: Any) -> ESGMetrics:
    """
    Derive the four ratios from anything carrying the canonical metric
    attributes (a stored ESGRecord or an unsaved ESGResponseInput).
    """
    def field(name: str) -> Any:
        return getattr(record, name, None)

    return ESGMetrics(
        carbon_intensity=carbon_intensity(field("carbon_emissions_tco2e"), field("total_revenue_inr")),
        renewable_ratio=renewable_ratio(field("renewable_electricity_kwh"), field("total_electricity_kwh")),
        diversity_ratio=diversity_ratio(field("female_employees"), field("total_employees")),
        community_ratio=community_ratio(field("community_investment_inr"), field("total_revenue_inr")),
    )


def format_carbon_intensity(value: float) -> str:
    return f"{value:.{CARBON_INTENSITY_DECIMALS}f}"


def format_percent(value: float) -> str:
    return f"{value:.{PERCENT_DECIMALS}f}"


def format_metrics(metrics: ESGMetrics) -> Dict[str, str]:
    """Display strings keyed by the metrics' JSON names."""
    return {
        "carbonIntensity": format_carbon_intensity(metrics.carbon_intensity),
        "renewableRatio": format_percent(metrics.renewable_ratio),
        "diversityRatio": format_percent(metrics.diversity_ratio),
        "communityRatio": format_percent(metrics.community_ratio),
    }

import math

import pytest

from app.schemas.esg import ESGResponseInput
from app.services.esg_calculator import (
    calculate_esg_metrics,
    carbon_intensity,
    community_ratio,
    diversity_ratio,
    format_metrics,
    renewable_ratio,
    safe_ratio,
)

RATIOS = [carbon_intensity, renewable_ratio, diversity_ratio, community_ratio]


@pytest.mark.parametrize("ratio", RATIOS)
@pytest.mark.parametrize("denominator", [None, 0, 0.0, "", float("nan"), float("inf"), float("-inf"), "abc"])
def test_missing_or_zero_denominator_gives_exact_zero(ratio, denominator):
    result = ratio(10, denominator)
    assert result == 0
    assert math.isfinite(result)


@pytest.mark.parametrize("ratio", RATIOS)
@pytest.mark.parametrize("numerator", [None, float("nan"), float("inf")])
def test_missing_numerator_gives_zero(ratio, numerator):
    assert ratio(numerator, 100) == 0


def test_overflowing_result_gives_zero():
    assert safe_ratio(1e308, 1e-308, scale=100.0) == 0


def test_scenario_values():
    record = ESGResponseInput.model_validate(
        {
            "fiscalYear": "2023-24",
            "carbonEmissionsTco2e": 800,
            "totalRevenueInr": 50000000,
            "totalElectricityKwh": 120000,
            "renewableElectricityKwh": 30000,
            "totalEmployees": 200,
            "femaleEmployees": 90,
            "communityInvestmentInr": 1500000,
        }
    )
    metrics = calculate_esg_metrics(record)

    assert metrics.carbon_intensity == pytest.approx(0.000016)
    assert metrics.renewable_ratio == pytest.approx(25.0)
    assert metrics.diversity_ratio == pytest.approx(45.0)
    assert metrics.community_ratio == pytest.approx(3.0)

    assert format_metrics(metrics) == {
        "carbonIntensity": "0.000016",
        "renewableRatio": "25.00",
        "diversityRatio": "45.00",
        "communityRatio": "3.00",
    }


def test_empty_record_is_all_zero():
    metrics = calculate_esg_metrics(ESGResponseInput(fiscal_year="2023-24"))
    assert metrics.model_dump() == {
        "carbon_intensity": 0.0,
        "renewable_ratio": 0.0,
        "diversity_ratio": 0.0,
        "community_ratio": 0.0,
    }


def test_any_object_with_metric_attributes():
    class Row:
        female_employees = 1
        total_employees = 3

    metrics = calculate_esg_metrics(Row())
    assert metrics.diversity_ratio == pytest.approx(33.333333)
    assert metrics.carbon_intensity == 0
    assert format_metrics(metrics)["diversityRatio"] == "33.33"

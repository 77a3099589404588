import pytest

from app.schemas.esg import ESGResponseInput
from app.services.coercion import to_count, to_fiscal_year, to_number, to_privacy_flag


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        ("", None),
        ("   ", None),
        ("42", 42.0),
        (" 3.5 ", 3.5),
        (7, 7.0),
        (0, 0.0),
        ("0", 0.0),
        (True, 1.0),
        ("abc", None),
        ("NaN", None),
        ("Infinity", None),
        (float("nan"), None),
        ([1, 2], None),
        ({"value": 1}, None),
    ],
)
def test_to_number(raw, expected):
    assert to_number(raw) == expected


def test_zero_is_not_treated_as_missing():
    assert to_number(0) is not None
    assert to_count("0") == 0


@pytest.mark.parametrize("raw, expected", [("", None), (None, None), ("200", 200), (200.0, 200), ("2.5", None), ("x", None)])
def test_to_count(raw, expected):
    assert to_count(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [(True, True), (False, False), ("Yes", True), ("No", False), ("yes", None), ("", None), (None, None), (1, None)],
)
def test_to_privacy_flag(raw, expected):
    assert to_privacy_flag(raw) is expected


def test_to_fiscal_year():
    assert to_fiscal_year(" 2023-24 ") == "2023-24"
    assert to_fiscal_year("") is None
    assert to_fiscal_year(None) is None
    assert to_fiscal_year(2023) == "2023"


def test_empty_employee_count_is_stored_as_none():
    record = ESGResponseInput.model_validate({"fiscalYear": "2023-24", "totalEmployees": ""})
    assert record.total_employees is None


def test_upper_case_unit_spellings_are_synonyms():
    record = ESGResponseInput.model_validate(
        {
            "fiscalYear": "2022-23",
            "totalElectricityKWh": "1000",
            "renewableElectricityKWh": "250",
            "carbonEmissionsTCO2e": "12.5",
            "avgTrainingHoursPerEmployee": "8",
            "communityInvestmentINR": "5000",
            "totalRevenueINR": "100000",
        }
    )
    assert record.total_electricity_kwh == 1000.0
    assert record.renewable_electricity_kwh == 250.0
    assert record.carbon_emissions_tco2e == 12.5
    assert record.avg_training_hours == 8.0
    assert record.community_investment_inr == 5000.0
    assert record.total_revenue_inr == 100000.0


def test_snake_case_names_are_accepted():
    record = ESGResponseInput.model_validate({"fiscal_year": "2021-22", "total_fuel_liters": 40})
    assert record.fiscal_year == "2021-22"
    assert record.total_fuel_liters == 40.0


def test_bad_values_degrade_instead_of_failing():
    record = ESGResponseInput.model_validate(
        {
            "fiscalYear": "2023-24",
            "totalElectricityKwh": "lots",
            "independentBoardPct": None,
            "hasDataPrivacyPolicy": "Maybe",
            "unknownField": "ignored",
        }
    )
    values = record.metric_values()
    assert values["total_electricity_kwh"] is None
    assert values["independent_board_pct"] is None
    assert values["has_data_privacy_policy"] is None
    assert "unknownField" not in values
    assert len(values) == 11


def test_missing_fiscal_year_is_left_for_the_store_to_reject():
    assert ESGResponseInput.model_validate({"totalEmployees": 5}).fiscal_year is None

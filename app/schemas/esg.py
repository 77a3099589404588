from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.services.coercion import to_count, to_fiscal_year, to_number, to_privacy_flag


# Canonical metric columns, in questionnaire order
METRIC_FIELDS = (
    "total_electricity_kwh",
    "renewable_electricity_kwh",
    "total_fuel_liters",
    "carbon_emissions_tco2e",
    "total_employees",
    "female_employees",
    "avg_training_hours",
    "community_investment_inr",
    "independent_board_pct",
    "has_data_privacy_policy",
    "total_revenue_inr",
)

NUMBER_FIELDS = (
    "total_electricity_kwh",
    "renewable_electricity_kwh",
    "total_fuel_liters",
    "carbon_emissions_tco2e",
    "avg_training_hours",
    "community_investment_inr",
    "independent_board_pct",
    "total_revenue_inr",
)

COUNT_FIELDS = ("total_employees", "female_employees")


def to_json_name(name: str) -> str:
    """total_electricity_kwh -> totalElectricityKwh"""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def as_utc(value: Any) -> Any:
    # SQLite hands DateTime(timezone=True) columns back without tzinfo; they were written as UTC
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _names(field: str, *synonyms: str) -> AliasChoices:
    return AliasChoices(to_json_name(field), *synonyms, field)


class ESGResponseInput(BaseModel):
    """
    Questionnaire payload exactly as a client posts it.

    Older clients spell some keys with upper-case units (totalElectricityKWh,
    communityInvestmentINR, ...); both spellings, and snake_case, land on the
    same attribute. Values are coerced here so nothing past this model ever
    sees a string or a NaN.
    """

    model_config = ConfigDict(extra="ignore")

    fiscal_year: Optional[str] = Field(None, validation_alias=_names("fiscal_year"))

    total_electricity_kwh: Optional[float] = Field(
        None, validation_alias=_names("total_electricity_kwh", "totalElectricityKWh")
    )
    renewable_electricity_kwh: Optional[float] = Field(
        None, validation_alias=_names("renewable_electricity_kwh", "renewableElectricityKWh")
    )
    total_fuel_liters: Optional[float] = Field(None, validation_alias=_names("total_fuel_liters"))
    carbon_emissions_tco2e: Optional[float] = Field(
        None, validation_alias=_names("carbon_emissions_tco2e", "carbonEmissionsTCO2e")
    )

    total_employees: Optional[int] = Field(None, validation_alias=_names("total_employees"))
    female_employees: Optional[int] = Field(None, validation_alias=_names("female_employees"))
    avg_training_hours: Optional[float] = Field(
        None, validation_alias=_names("avg_training_hours", "avgTrainingHoursPerEmployee")
    )
    community_investment_inr: Optional[float] = Field(
        None, validation_alias=_names("community_investment_inr", "communityInvestmentINR")
    )

    independent_board_pct: Optional[float] = Field(None, validation_alias=_names("independent_board_pct"))
    has_data_privacy_policy: Optional[bool] = Field(None, validation_alias=_names("has_data_privacy_policy"))

    total_revenue_inr: Optional[float] = Field(
        None, validation_alias=_names("total_revenue_inr", "totalRevenueINR")
    )

    @field_validator("fiscal_year", mode="before")
    @classmethod
    def _coerce_fiscal_year(cls, v: Any) -> Optional[str]:
        return to_fiscal_year(v)

    @field_validator(*NUMBER_FIELDS, mode="before")
    @classmethod
    def _coerce_number(cls, v: Any) -> Optional[float]:
        return to_number(v)

    @field_validator(*COUNT_FIELDS, mode="before")
    @classmethod
    def _coerce_count(cls, v: Any) -> Optional[int]:
        return to_count(v)

    @field_validator("has_data_privacy_policy", mode="before")
    @classmethod
    def _coerce_privacy_flag(cls, v: Any) -> Optional[bool]:
        return to_privacy_flag(v)

    def metric_values(self) -> Dict[str, Any]:
        """The eleven metric columns, ready to be written to a store."""
        return {name: getattr(self, name) for name in METRIC_FIELDS}


class ESGRecord(BaseModel):
    """A stored questionnaire response for one (user, fiscal year)."""

    model_config = ConfigDict(
        alias_generator=to_json_name,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    user_id: str
    fiscal_year: str

    total_electricity_kwh: Optional[float] = None
    renewable_electricity_kwh: Optional[float] = None
    total_fuel_liters: Optional[float] = None
    carbon_emissions_tco2e: Optional[float] = None
    total_employees: Optional[int] = None
    female_employees: Optional[int] = None
    avg_training_hours: Optional[float] = None
    community_investment_inr: Optional[float] = None
    independent_board_pct: Optional[float] = None
    has_data_privacy_policy: Optional[bool] = None
    total_revenue_inr: Optional[float] = None

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def _timestamps_in_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class ESGMetrics(BaseModel):
    model_config = ConfigDict(alias_generator=to_json_name, populate_by_name=True)

    carbon_intensity: float
    renewable_ratio: float
    diversity_ratio: float
    community_ratio: float


class ESGSummaryRow(BaseModel):
    model_config = ConfigDict(alias_generator=to_json_name, populate_by_name=True)

    fiscal_year: str
    metrics: ESGMetrics
    formatted: Dict[str, str]
    updated_at: Optional[datetime] = None


class ResponseItem(BaseModel):
    item: ESGRecord


class ResponseList(BaseModel):
    data: List[ESGRecord]


class ResponseLookup(BaseModel):
    data: Optional[ESGRecord] = None


class SummaryList(BaseModel):
    data: List[ESGSummaryRow]

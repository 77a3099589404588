from typing import Any, Dict, List, Optional

import pandas as pd

from app.schemas.esg import METRIC_FIELDS, ESGRecord, to_json_name
from app.services.esg_calculator import calculate_esg_metrics, format_metrics

RECORD_COLUMNS = ["id", "fiscal_year", *METRIC_FIELDS, "created_at", "updated_at"]
METRIC_COLUMNS = ["carbonIntensity", "renewableRatio", "diversityRatio", "communityRatio"]
CSV_COLUMNS = [to_json_name(c) for c in RECORD_COLUMNS] + METRIC_COLUMNS


def _yes_no(value: Optional[bool]) -> Optional[str]:
    if value is None:
        return None
    return "Yes" if value else "No"


def _csv_row(record: ESGRecord) -> Dict[str, Any]:
    row = {to_json_name(c): getattr(record, c) for c in RECORD_COLUMNS}
    row["hasDataPrivacyPolicy"] = _yes_no(record.has_data_privacy_policy)
    row["createdAt"] = record.created_at.isoformat()
    row["updatedAt"] = record.updated_at.isoformat()
    row.update(format_metrics(calculate_esg_metrics(record)))
    return row


def generate_esg_csv(records: List[ESGRecord]) -> str:
    """
    One line per stored response plus its formatted ratios.
    Unreported values are left as empty cells.
    """
    # object dtype keeps integer head counts from turning into 200.0 next to a blank
    df = pd.DataFrame([_csv_row(r) for r in records], columns=CSV_COLUMNS, dtype=object)
    return df.to_csv(index=False, na_rep="", lineterminator="\n")


def export_filename(year: Optional[str], extension: str) -> str:
    return f"esg-reports-{year or 'all'}.{extension}"

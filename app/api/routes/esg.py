from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from app.api.deps import get_current_user, get_response_store
from app.errors import PersistenceError
from app.schemas.auth import User
from app.schemas.esg import ESGResponseInput, ESGSummaryRow, SummaryList
from app.services.esg_calculator import calculate_esg_metrics, format_metrics
from app.services.response_store import ResponseStore

router = APIRouter()


@router.get("/summary", response_model=SummaryList)
def esg_summary(
    user: User = Depends(get_current_user),
    store: ResponseStore = Depends(get_response_store),
):
    """
    Ratios for every saved fiscal year, oldest first, for the summary chart.
    """
    try:
        records = store.list(user.id)
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Load failed")

    rows = []
    for record in records:
        metrics = calculate_esg_metrics(record)
        rows.append(
            ESGSummaryRow(
                fiscal_year=record.fiscal_year,
                metrics=metrics,
                formatted=format_metrics(metrics),
                updated_at=record.updated_at,
            )
        )
    return SummaryList(data=rows)


@router.post("/metrics/calculate", response_model=ESGSummaryRow)
def calculate_metrics(
    payload: Dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
):
    """
    Preview the ratios for questionnaire answers without saving them.
    """
    record = ESGResponseInput.model_validate(payload)
    metrics = calculate_esg_metrics(record)
    return ESGSummaryRow(
        fiscal_year=record.fiscal_year or "",
        metrics=metrics,
        formatted=format_metrics(metrics),
    )

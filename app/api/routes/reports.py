import io
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from app.api.deps import get_current_user, get_response_store
from app.errors import PersistenceError
from app.schemas.auth import User
from app.services.coercion import to_fiscal_year
from app.services.csv_export import export_filename, generate_esg_csv
from app.services.report_generator import generate_esg_report_pdf
from app.services.response_store import ResponseStore

router = APIRouter()


def _load(store: ResponseStore, user: User, year: Optional[str]):
    try:
        return store.list(user.id, fiscal_year=year)
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Load failed")


@router.get("/csv")
def download_esg_csv(
    year: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    store: ResponseStore = Depends(get_response_store),
):
    """
    Download saved responses as CSV, optionally for a single fiscal year.
    """
    year = to_fiscal_year(year)
    csv_text = generate_esg_csv(_load(store, user, year))
    buffer = io.BytesIO(csv_text.encode("utf-8"))

    return StreamingResponse(
        buffer,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={export_filename(year, 'csv')}"},
    )


@router.get("/pdf")
def download_esg_pdf(
    year: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    store: ResponseStore = Depends(get_response_store),
):
    """
    Generate a PDF ESG report from saved responses.
    """
    year = to_fiscal_year(year)
    pdf_bytes = generate_esg_report_pdf(_load(store, user, year), year=year)
    buffer = io.BytesIO(pdf_bytes)

    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={export_filename(year, 'pdf')}"},
    )

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from app.api.deps import get_current_user, get_response_store
from app.errors import InvalidRecordError, PersistenceError
from app.schemas.auth import User
from app.schemas.esg import ESGResponseInput, ResponseItem, ResponseList, ResponseLookup
from app.services.coercion import to_fiscal_year
from app.services.response_store import ResponseStore

router = APIRouter()


@router.get("/responses")
def list_responses(
    year: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    store: ResponseStore = Depends(get_response_store),
):
    """
    All of the user's responses in fiscal-year order, or, with ?year=,
    just that year's response (data is null when nothing was saved).
    """
    year = to_fiscal_year(year)
    try:
        if year:
            return ResponseLookup(data=store.get(user.id, year))
        return ResponseList(data=store.list(user.id))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Load failed")


@router.post("/responses", response_model=ResponseItem)
def save_response(
    payload: Dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    store: ResponseStore = Depends(get_response_store),
):
    """
    Save the questionnaire for one fiscal year. Saving the same year again
    overwrites the previous answers.
    """
    record = ESGResponseInput.model_validate(payload)
    try:
        saved = store.upsert(user.id, record)
    except InvalidRecordError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Save failed")
    return ResponseItem(item=saved)

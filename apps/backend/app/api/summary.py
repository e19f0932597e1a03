from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user
from app.schemas import SummaryOut
from app.services.summary_service import build_summary


router = APIRouter(tags=["summary"])


@router.get("/summary", response_model=SummaryOut)
def get_summary(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return build_summary(db, current_user.id)

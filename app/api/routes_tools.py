"""Stateless calculators used by the entry forms."""
import datetime as dt

from fastapi import APIRouter

from app.api.dependencies import VerifiedUserDep
from app.models import schemas
from app.services.gst_service import format_gst_breakdown, from_exclusive, from_inclusive
from app.services.subscription_pattern import pattern_day
from app.utils.currency import format_currency

router = APIRouter()


@router.post("/gst", response_model=schemas.GSTOut)
def gst_calculator(payload: schemas.GSTRequest, _user: VerifiedUserDep):
    if payload.mode == "inclusive":
        split = from_inclusive(payload.amount, payload.rate)
    else:
        split = from_exclusive(payload.amount, payload.rate)
    return schemas.GSTOut(
        base=split.base,
        tax=split.tax,
        total=split.total,
        breakdown=format_gst_breakdown(split.total, payload.rate),
        formatted_total=format_currency(split.total),
    )


@router.get("/pattern-day", response_model=schemas.PatternDayOut)
def pattern_day_lookup(anchor: dt.date, target: dt.date, _user: VerifiedUserDep):
    return schemas.PatternDayOut(anchor=anchor, target=target, pattern_day=pattern_day(anchor, target))

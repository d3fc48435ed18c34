from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import Payment, Submission
from schemas.submission import (
    FunnelUpdate,
    PaymentCreate,
    SaveSubmissionRequest,
    SubmissionAdminUpdate,
    SummaryViewedRequest,
)
from services import submission_service
from services.submission_service import SubmissionConflict, SubmissionNotFound, SubmissionValidationError
from utils.case import dict_keys_to_camel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["submissions"])
admin_router = APIRouter(prefix="/api/admin/submissions", tags=["admin"])


def _submission_to_response(s: Submission) -> dict[str, Any]:
    """Serialize submission with camelCase keys for the dashboards."""
    return {
        "id": s.id,
        "clientId": s.client_id,
        "status": s.status,
        "funnelStatus": s.funnel_status,
        "email": s.email,
        "firstName": s.first_name,
        "lastName": s.last_name,
        "phone": s.phone,
        "address": s.address,
        "city": s.city,
        "postalCode": s.postal_code,
        "country": s.country,
        "totalPrice": s.total_price,
        "notes": s.notes,
        "data": s.data or {},
        "version": s.version,
        "createdAt": s.created_at.isoformat() if s.created_at else None,
        "updatedAt": s.updated_at.isoformat() if s.updated_at else None,
    }


def _payment_to_response(p: Payment) -> dict[str, Any]:
    return dict_keys_to_camel({
        "id": p.id,
        "type": p.type,
        "provider_reference": p.provider_reference,
        "amount": p.amount,
        "currency": p.currency,
        "status": p.status,
        "receipt_url": p.receipt_url,
        "invoice_url": p.invoice_url,
        "created_at": p.created_at.isoformat() if p.created_at else None,
    })


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, SubmissionNotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, SubmissionConflict):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


@router.post("/save-submission")
async def save_submission(body: SaveSubmissionRequest, db: AsyncSession = Depends(get_db)):
    """Create or update the pending submission of the caller's form session."""
    try:
        submission = await submission_service.save_submission(
            db,
            form_data=body.form_data,
            current_step=body.current_step,
            completed_steps=body.completed_steps,
            total_amount=body.total_amount,
            session_id=body.session_id,
            client_id=body.client_id,
            expected_version=body.version,
        )
    except SubmissionValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except SubmissionConflict as e:
        await db.rollback()
        return JSONResponse(status_code=409, content={"error": str(e)})
    except Exception as e:
        logger.exception("save-submission failed")
        await db.rollback()
        return JSONResponse(status_code=500, content={"error": str(e) or "Save failed"})
    return {"id": submission.id, "version": submission.version}


@router.post("/submissions/summary-viewed")
async def summary_viewed(body: SummaryViewedRequest, db: AsyncSession = Depends(get_db)):
    try:
        submission = await submission_service.mark_summary_viewed(db, body.session_id)
    except (SubmissionValidationError, SubmissionNotFound, SubmissionConflict) as e:
        raise _http_error(e) from e
    return {"id": submission.id, "funnelStatus": submission.funnel_status}


@router.get("/submissions")
async def list_submissions(
    client_id: Optional[str] = Query(None, alias="clientId"),
    db: AsyncSession = Depends(get_db),
):
    submissions = await submission_service.list_submissions(db, client_id=client_id)
    return [_submission_to_response(s) for s in submissions]


@router.get("/submissions/{submission_id}")
async def get_submission(submission_id: str, db: AsyncSession = Depends(get_db)):
    try:
        submission = await submission_service.get_submission(db, submission_id)
    except SubmissionNotFound as e:
        raise _http_error(e) from e
    return _submission_to_response(submission)


@router.post("/submissions/{submission_id}/funnel")
async def update_funnel(submission_id: str, body: FunnelUpdate, db: AsyncSession = Depends(get_db)):
    try:
        submission = await submission_service.advance_funnel(db, submission_id, body.funnel_status)
    except (SubmissionValidationError, SubmissionNotFound, SubmissionConflict) as e:
        raise _http_error(e) from e
    return {"id": submission.id, "funnelStatus": submission.funnel_status}


@router.post("/submissions/{submission_id}/payment")
async def record_payment(submission_id: str, body: PaymentCreate, db: AsyncSession = Depends(get_db)):
    try:
        submission, processed = await submission_service.complete_payment(db, submission_id, body)
    except (SubmissionNotFound, SubmissionConflict) as e:
        raise _http_error(e) from e
    return {
        "verified": True,
        "alreadyProcessed": not processed,
        "submission": _submission_to_response(submission),
    }


@router.get("/submissions/{submission_id}/transactions")
async def list_transactions(submission_id: str, db: AsyncSession = Depends(get_db)):
    try:
        payments = await submission_service.list_transactions(db, submission_id)
    except SubmissionNotFound as e:
        raise _http_error(e) from e
    return {"transactions": [_payment_to_response(p) for p in payments]}


@admin_router.patch("/{submission_id}")
async def admin_update_submission(
    submission_id: str,
    body: SubmissionAdminUpdate,
    version: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    try:
        submission = await submission_service.admin_update(db, submission_id, body, expected_version=version)
    except (SubmissionNotFound, SubmissionConflict) as e:
        raise _http_error(e) from e
    return _submission_to_response(submission)

"""
Submission persistence for the intake form.

The form saves after every wizard step. Anonymous visitors are correlated by a
client-generated session id stored inside the submission's data blob, so a
save either updates the pending submission already carrying that session id
or creates a new one. The funnel stage only ever moves forward.

Rows carry a version counter; an update racing another update for the same
row fails with SubmissionConflict instead of silently overwriting it. Two
simultaneous first saves for one session can still insert two rows.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from config import settings
from models import Payment, Submission
from schemas.form_data import FormDataSchema
from schemas.submission import PaymentCreate, SubmissionAdminUpdate
from services import funnel
from services.pricing import calculate_total_amount, load_catalog

logger = logging.getLogger(__name__)

STATUS_PENDING_PAYMENT = "pending_payment"
STATUS_PENDING = "pending"
SUMMARY_LOOKUP_STATUSES = ("pending", "pending_payment", "confirmed")


class SubmissionValidationError(ValueError):
    pass


class SubmissionNotFound(LookupError):
    pass


class SubmissionConflict(Exception):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _coerce_form(form_data: Union[FormDataSchema, dict[str, Any], None]) -> FormDataSchema:
    if form_data is None:
        return FormDataSchema()
    if isinstance(form_data, FormDataSchema):
        return form_data
    return FormDataSchema.model_validate(form_data)


def _build_payload(
    form: FormDataSchema,
    session_id: str,
    current_step: int,
    completed_steps: list[int],
    total_amount: Optional[float],
    funnel_status: str,
) -> dict[str, Any]:
    """Column values plus the data blob for one save."""
    return {
        "email": form.email or None,
        "first_name": form.first_name or None,
        "last_name": form.last_name or None,
        "phone": form.phone or "",
        "address": form.address or None,
        "city": form.city or None,
        "postal_code": form.postal_code or None,
        "country": form.country or None,
        "status": STATUS_PENDING_PAYMENT,
        "funnel_status": funnel_status,
        "total_price": total_amount,
        "notes": form.notes or None,
        "data": {
            "session_id": session_id,
            "selected_services": list(form.selected_services),
            "documents": dict(form.service_documents),
            "selectedServices": list(form.selected_services),
            "serviceDocuments": dict(form.service_documents),
            "delivery_method": form.delivery_method,
            "signatories": list(form.signatories),
            "is_signatory": form.is_signatory,
            "currency": form.currency or settings.default_currency,
            "gclid": form.gclid,
            "current_step": current_step,
            "completed_steps": list(completed_steps),
            "funnel_status": funnel_status,
        },
    }


async def _flush(session: AsyncSession, submission_id: str) -> None:
    try:
        await session.flush()
    except StaleDataError as e:
        raise SubmissionConflict(f"Submission {submission_id} was modified concurrently") from e


async def find_by_session(
    session: AsyncSession,
    session_id: str,
    statuses: Iterable[str] = (STATUS_PENDING_PAYMENT,),
    limit: Optional[int] = None,
) -> Optional[Submission]:
    """Most recent submission in `statuses` whose data blob carries `session_id`.

    Only the latest `limit` candidates are scanned; there is no index on the
    session id.
    """
    result = await session.execute(
        select(Submission)
        .where(Submission.status.in_(list(statuses)))
        .order_by(Submission.created_at.desc())
        .limit(limit or settings.pending_lookup_limit)
    )
    for submission in result.scalars().all():
        if (submission.data or {}).get("session_id") == session_id:
            return submission
    return None


async def save_submission(
    session: AsyncSession,
    form_data: Union[FormDataSchema, dict[str, Any], None],
    current_step: Optional[int],
    completed_steps: Optional[list[int]],
    total_amount: Optional[float],
    session_id: Optional[str],
    client_id: Optional[str] = None,
    expected_version: Optional[int] = None,
) -> Submission:
    """Create or update the pending submission for `session_id` and return it."""
    if not session_id:
        raise SubmissionValidationError("sessionId required")

    form = _coerce_form(form_data)
    step = current_step if current_step is not None else 1
    stage = funnel.stage_for_step(step)

    if total_amount is None:
        services, options = await load_catalog(session)
        total_amount = calculate_total_amount(
            form.to_wire(), services, options, form.currency or settings.default_currency
        )

    payload = _build_payload(form, session_id, step, completed_steps or [], total_amount, stage)
    existing = await find_by_session(session, session_id)

    if existing is not None:
        if expected_version is not None and expected_version != existing.version:
            raise SubmissionConflict(
                f"Submission {existing.id} is at version {existing.version}, not {expected_version}"
            )
        if not funnel.should_advance(existing.funnel_status, stage):
            del payload["funnel_status"]
            payload["data"]["funnel_status"] = existing.funnel_status
        data = {**(existing.data or {}), **payload.pop("data")}
        for field, value in payload.items():
            setattr(existing, field, value)
        existing.data = data
        if client_id:
            existing.client_id = client_id
        existing.updated_at = _now()
        await _flush(session, existing.id)
        logger.debug("Updated submission %s (step %s, funnel %s)", existing.id, step, existing.funnel_status)
        return existing

    now = _now()
    submission = Submission(id=_new_id("sub"), client_id=client_id, created_at=now, updated_at=now, **payload)
    session.add(submission)
    await session.flush()
    logger.info("Created submission %s for session %s", submission.id, session_id)
    return submission


async def get_submission(session: AsyncSession, submission_id: str) -> Submission:
    result = await session.execute(select(Submission).where(Submission.id == submission_id))
    submission = result.scalar_one_or_none()
    if submission is None:
        raise SubmissionNotFound(f"Submission {submission_id} not found")
    return submission


async def list_submissions(session: AsyncSession, client_id: Optional[str] = None) -> list[Submission]:
    query = select(Submission).order_by(Submission.created_at.desc())
    if client_id:
        query = query.where(Submission.client_id == client_id)
    result = await session.execute(query)
    return list(result.scalars().all())


def _apply_stage(submission: Submission, stage: str) -> bool:
    if not funnel.should_advance(submission.funnel_status, stage):
        return False
    submission.funnel_status = stage
    submission.data = {**(submission.data or {}), "funnel_status": stage}
    submission.updated_at = _now()
    return True


async def advance_funnel(session: AsyncSession, submission_id: str, stage: str) -> Submission:
    """Move a submission to `stage` unless it is already there or further."""
    if stage not in funnel.FUNNEL_RANK:
        raise SubmissionValidationError(f"Unknown funnel stage: {stage}")
    submission = await get_submission(session, submission_id)
    if _apply_stage(submission, stage):
        await _flush(session, submission.id)
        logger.info("Submission %s funnel advanced to %s", submission.id, stage)
    return submission


async def mark_summary_viewed(session: AsyncSession, session_id: Optional[str]) -> Submission:
    if not session_id:
        raise SubmissionValidationError("sessionId required")
    submission = await find_by_session(session, session_id, statuses=SUMMARY_LOOKUP_STATUSES)
    if submission is None:
        raise SubmissionNotFound(f"No submission found for session {session_id}")
    if _apply_stage(submission, funnel.SUMMARY_VIEWED):
        await _flush(session, submission.id)
    return submission


async def complete_payment(
    session: AsyncSession, submission_id: str, payment: PaymentCreate
) -> tuple[Submission, bool]:
    """Record a completed payment and release the submission to the back office.

    Returns the submission and whether this call processed the payment;
    submissions no longer awaiting payment are returned untouched.
    """
    submission = await get_submission(session, submission_id)
    if submission.status != STATUS_PENDING_PAYMENT:
        logger.info("Payment for submission %s already processed", submission_id)
        return submission, False

    record = Payment(
        id=_new_id("pay"),
        submission_id=submission.id,
        type="payment",
        provider_reference=payment.provider_reference,
        amount=payment.amount,
        currency=payment.currency.upper(),
        status="succeeded",
        receipt_url=payment.receipt_url,
        invoice_url=payment.invoice_url,
        created_at=_now(),
    )
    session.add(record)

    submission.data = {
        **(submission.data or {}),
        "payment": {
            "provider_reference": payment.provider_reference,
            "payment_intent_id": payment.payment_intent_id,
            "amount_paid": payment.amount,
            "currency": payment.currency.lower(),
            "payment_status": "paid",
            "paid_at": _now().isoformat(),
            "invoice_url": payment.invoice_url or payment.receipt_url,
        },
    }
    submission.status = STATUS_PENDING
    _apply_stage(submission, funnel.PAYMENT_COMPLETED)
    submission.updated_at = _now()
    await _flush(session, submission.id)
    logger.info("Payment recorded for submission %s (%s %s)", submission.id, payment.amount, record.currency)
    return submission, True


async def list_transactions(session: AsyncSession, submission_id: str) -> list[Payment]:
    await get_submission(session, submission_id)
    result = await session.execute(
        select(Payment).where(Payment.submission_id == submission_id).order_by(Payment.created_at.desc())
    )
    return list(result.scalars().all())


async def admin_update(
    session: AsyncSession,
    submission_id: str,
    update: SubmissionAdminUpdate,
    expected_version: Optional[int] = None,
) -> Submission:
    """Back-office edit of status and notes; never touches the funnel stage."""
    submission = await get_submission(session, submission_id)
    if expected_version is not None and expected_version != submission.version:
        raise SubmissionConflict(
            f"Submission {submission.id} is at version {submission.version}, not {expected_version}"
        )
    if update.status is not None:
        submission.status = update.status
    if update.notes is not None:
        submission.notes = update.notes
    submission.updated_at = _now()
    await _flush(session, submission.id)
    return submission

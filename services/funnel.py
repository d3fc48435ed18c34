"""
Funnel stages for the intake + payment flow and their ordering.

Stages are plain string constants stored both in the submission's
funnel_status column and inside its data blob. A stored stage may only move
forward: every write goes through should_advance().
"""
from __future__ import annotations

from typing import Optional

STARTED = "started"
SERVICES_SELECTED = "services_selected"
DOCUMENTS_UPLOADED = "documents_uploaded"
DELIVERY_METHOD_SELECTED = "delivery_method_selected"
PERSONAL_INFO_COMPLETED = "personal_info_completed"
SUMMARY_VIEWED = "summary_viewed"
PAYMENT_PENDING = "payment_pending"
PAYMENT_COMPLETED = "payment_completed"
SUBMISSION_COMPLETED = "submission_completed"

FUNNEL_ORDER: list[str] = [
    STARTED,
    SERVICES_SELECTED,
    DOCUMENTS_UPLOADED,
    DELIVERY_METHOD_SELECTED,
    PERSONAL_INFO_COMPLETED,
    SUMMARY_VIEWED,
    PAYMENT_PENDING,
    PAYMENT_COMPLETED,
    SUBMISSION_COMPLETED,
]

# 1-indexed; unknown stages rank 0
FUNNEL_RANK: dict[str, int] = {stage: i + 1 for i, stage in enumerate(FUNNEL_ORDER)}

# (minimum current step, stage), checked top to bottom
STEP_STAGE_THRESHOLDS: list[tuple[int, str]] = [
    (4, PERSONAL_INFO_COMPLETED),
    (3, DELIVERY_METHOD_SELECTED),
    (2, DOCUMENTS_UPLOADED),
    (1, SERVICES_SELECTED),
]


def rank(stage: Optional[str]) -> int:
    return FUNNEL_RANK.get(stage or "", 0)


def should_advance(current: Optional[str], candidate: Optional[str]) -> bool:
    """True when writing `candidate` over `current` moves the funnel forward."""
    if not candidate:
        return False
    return rank(candidate) > rank(current)


def stage_for_step(step: int) -> str:
    """Map the wizard's current step number to the stage it implies."""
    for minimum, stage in STEP_STAGE_THRESHOLDS:
        if step >= minimum:
            return stage
    return STARTED

from schemas.catalog import (
    OptionCreate,
    OptionUpdate,
    QuoteRequest,
    ServiceCreate,
    ServiceUpdate,
)
from schemas.form_data import FormDataSchema
from schemas.submission import (
    FunnelUpdate,
    PaymentCreate,
    ResumeRequest,
    SaveSubmissionRequest,
    SubmissionAdminUpdate,
    SummaryViewedRequest,
)

__all__ = [
    "FormDataSchema",
    "FunnelUpdate",
    "OptionCreate",
    "OptionUpdate",
    "PaymentCreate",
    "QuoteRequest",
    "ResumeRequest",
    "SaveSubmissionRequest",
    "ServiceCreate",
    "ServiceUpdate",
    "SubmissionAdminUpdate",
    "SummaryViewedRequest",
]

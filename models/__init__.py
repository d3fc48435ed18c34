from models.catalog import Service, ServiceOption
from models.payment import Payment
from models.submission import Submission

__all__ = [
    "Payment",
    "Service",
    "ServiceOption",
    "Submission",
]

"""Exception hierarchy for DairyOps.

Every domain error carries a user-facing message, a stable code, the HTTP
status the API layer should answer with, and optional details.

Error codes follow pattern: [CATEGORY][NUMBER]
- CUS: Customer / route errors (001-099)
- CAT: Product catalogue errors (100-149)
- SUB: Subscription and modification errors (150-199)
- SAL: Sales and payment errors (200-299)
- ORD: Daily order and delivery errors (300-399)
- USR: Auth / MFA errors (400-499)
- STO: Data store errors (500-599)
"""

from __future__ import annotations

from typing import Any


class DairyOpsException(Exception):
    """Base exception for all DairyOps application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


class NotFoundError(DairyOpsException):
    """Record of a given kind does not exist."""

    _codes = {
        "customer": "CUS001",
        "route": "CUS002",
        "product": "CAT100",
        "subscription": "SUB150",
        "modification": "SUB160",
        "sale": "SAL200",
        "payment": "SAL250",
        "order": "ORD300",
        "delivery": "ORD350",
        "user": "USR400",
        "factor": "USR410",
        "challenge": "USR411",
    }

    def __init__(self, entity: str, record_id: str | None = None):
        label = entity.capitalize()
        message = f"{label} not found" if not record_id else f"{label} {record_id} not found"
        super().__init__(
            message=message,
            code=self._codes.get(entity, "STO599"),
            status_code=404,
            details={"entity": entity, "id": record_id} if record_id else {"entity": entity},
        )


class ValidationFailedError(DairyOpsException):
    """Business-rule validation failed for submitted data."""

    def __init__(self, message: str, field: str | None = None, code: str = "SUB170"):
        super().__init__(
            message=message,
            code=code,
            status_code=422,
            details={"field": field} if field else {},
        )


# ============================================================================
# DAILY ORDERS (ORD300-399)
# ============================================================================

class OrdersAlreadyExistError(DairyOpsException):
    """Orders were already generated for the date."""

    def __init__(self, order_date: str):
        super().__init__(
            message=f"Orders already exist for {order_date}. Please delete existing orders first.",
            code="ORD301",
            status_code=409,
            details={"order_date": order_date},
        )


class NoOrdersToGenerateError(DairyOpsException):
    """Nothing qualifies for order generation on the date."""

    def __init__(self, order_date: str, reason: str = "No orders to generate for this date"):
        super().__init__(
            message=reason,
            code="ORD302",
            status_code=422,
            details={"order_date": order_date},
        )


class OrderNotDeliverableError(DairyOpsException):
    """Order is not waiting for delivery (already delivered or not generated)."""

    def __init__(self, order_id: str, status: str):
        super().__init__(
            message=f"Order {order_id} is not available for delivery or has already been delivered",
            code="ORD352",
            status_code=409,
            details={"order_id": order_id, "status": status},
        )


# ============================================================================
# AUTH / MFA (USR400-499)
# ============================================================================

class AuthError(DairyOpsException):
    """Base class for authentication errors."""


class InvalidCredentialsError(AuthError):
    def __init__(self):
        super().__init__(message="Invalid email or password", code="USR401", status_code=401)


class InvalidTOTPCodeError(AuthError):
    def __init__(self):
        super().__init__(
            message="The verification code is incorrect. Please check your authenticator app and try again.",
            code="USR402",
            status_code=401,
        )


class ChallengeExpiredError(AuthError):
    def __init__(self, challenge_id: str):
        super().__init__(
            message="This verification challenge has expired. Please request a new one.",
            code="USR403",
            status_code=401,
            details={"challenge_id": challenge_id},
        )


class MFARequiredError(AuthError):
    def __init__(self):
        super().__init__(
            message="Two-factor verification is required to access this resource",
            code="USR404",
            status_code=403,
            details={"required_aal": "aal2"},
        )


# ============================================================================
# DATA STORE (STO500-599)
# ============================================================================

class StoreError(DairyOpsException):
    """The backing data store rejected or failed an operation."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(
            message=message,
            code="STO500",
            status_code=400,
            details={"operation": operation} if operation else {},
        )

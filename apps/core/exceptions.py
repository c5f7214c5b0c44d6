"""
Domain errors raised by the lifecycle services.

Each error carries the HTTP status the JSON layer answers with, so views never
need to know which service rule was broken.
"""


class LifecycleError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, message="", **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def as_dict(self):
        payload = {"error": self.message, "code": self.code}
        if self.details:
            payload.update(self.details)
        return payload


class ValidationError(LifecycleError):
    """Input is missing or malformed. ``errors`` maps field names to messages."""

    code = "validation_error"

    def __init__(self, message="Invalid data.", errors=None):
        super().__init__(message, errors=errors or {})
        self.errors = errors or {}


class InvalidStateError(LifecycleError):
    status_code = 409
    code = "invalid_state"


class InvitationExpiredError(InvalidStateError):
    status_code = 410
    code = "invitation_expired"


class IncompleteError(LifecycleError):
    code = "incomplete"

    def __init__(self, message="Onboarding is incomplete.", missing_steps=()):
        super().__init__(message, missing_steps=list(missing_steps))
        self.missing_steps = list(missing_steps)


class ConflictError(LifecycleError):
    status_code = 409
    code = "conflict"


class ForbiddenError(LifecycleError):
    status_code = 403
    code = "forbidden"


class NotFoundError(LifecycleError):
    status_code = 404
    code = "not_found"


class ProvisioningTimeoutError(LifecycleError):
    status_code = 504
    code = "provisioning_timeout"


class PaymentProcessorError(LifecycleError):
    status_code = 502
    code = "payment_processor_error"

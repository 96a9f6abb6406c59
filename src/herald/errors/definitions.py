"""Pre-defined error instances for caller precondition failures."""

from __future__ import annotations

from herald.errors.herald_errors import HeraldError

# -- Authentication --------------------------------------------------------

ErrUnauthorized = HeraldError("invalid or missing API key", status_code=401, code="unauthorized")

# -- Validation ------------------------------------------------------------

ErrInvalidWebhookURL = HeraldError(
    "webhook url must be an absolute http(s) url", status_code=400, code="invalid-webhook-url"
)
ErrEmptyTypes = HeraldError(
    "at least one notification type is required", status_code=400, code="empty-types"
)

# -- Not Found -------------------------------------------------------------

ErrWebhookNotFound = HeraldError("webhook not found", status_code=404, code="webhook-not-found")
ErrSubscriptionNotFound = HeraldError(
    "subscription not found", status_code=404, code="subscription-not-found"
)
ErrScheduleNotFound = HeraldError(
    "scheduled delivery not found or already queued",
    status_code=404,
    code="schedule-not-found",
)

# -- Lifecycle -------------------------------------------------------------

ErrServiceNotStarted = HeraldError(
    "notification service not started", status_code=503, code="service-not-started"
)

"""Rendering, delivery and persistence errors."""

from __future__ import annotations

from herald.errors.herald_errors import HeraldError


class TemplateNotFoundError(HeraldError):
    """Raised when a notification type has no registered template.

    Never retried: a bad type will not become valid on a later tick.
    """

    def __init__(self, template_type: str) -> None:
        super().__init__(
            f"template not found for type: {template_type}",
            status_code=404,
            code="template-not-found",
        )
        self.template_type = template_type


class SinkError(HeraldError):
    """A single channel or webhook send failed."""

    def __init__(self, message: str, *, destination: str = "") -> None:
        super().__init__(message, status_code=502, code="sink-failure")
        self.destination = destination


class DeliveryError(HeraldError):
    """Job-level failure; triggers the retry policy."""

    def __init__(self, message: str, *, job_id: str = "") -> None:
        super().__init__(message, status_code=500, code="delivery-failure")
        self.job_id = job_id


class StoreError(HeraldError):
    """The configuration store failed to load or save a document."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=500, code="config-persistence-failure")

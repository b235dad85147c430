from __future__ import annotations


class RetryableError(Exception):
    """Indicates a collaborator failure that may succeed on retry."""


class NonRetryableError(Exception):
    """Indicates a failure that should not be retried."""


class NotFoundError(NonRetryableError):
    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} with id {entity_id} was not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidPricingContextError(NonRetryableError, ValueError):
    """Raised when a pricing context cannot be completed."""


class InvalidPriceDataError(NonRetryableError):
    """Raised when a stored price cannot be interpreted."""

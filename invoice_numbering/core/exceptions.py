"""Error taxonomy for invoice numbering."""


class NumberingError(Exception):
    """Base class for all invoice numbering errors."""


class InvalidTemplateError(NumberingError, ValueError):
    """A numbering template is malformed. Correctable by the caller."""


class PersistenceError(NumberingError):
    """The backing store could not commit a counter change."""

    def __init__(self, message: str, seller_id=None, period_key=None):
        super().__init__(message)
        self.seller_id = seller_id
        self.period_key = period_key


class NotFoundError(NumberingError, LookupError):
    """Unknown seller, department or numbering scheme."""


class PermissionDeniedError(NumberingError):
    """The acting user may not modify the requested resource."""

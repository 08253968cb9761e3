"""
Custom exceptions for the QuickSell backend

Every error the services raise derives from QuickSellError and carries the
HTTP status the API layer answers with.
"""


class QuickSellError(Exception):
    """Base exception for all application errors."""
    status_code = 500

    def __init__(self, message="An internal error occurred", payload=None):
        super().__init__(message)
        self.message = message
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class ValidationError(QuickSellError):
    """Malformed or missing Product/Sale fields. Raised before any store call."""
    status_code = 422

    @classmethod
    def from_pydantic(cls, message, exc):
        """Wrap a pydantic ValidationError, keeping one 'field: reason' line per error"""
        errors = [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors()]
        return cls(message, payload={'errors': errors})


class NotFound(QuickSellError):
    """A sale or product referenced by id does not exist."""
    status_code = 404

    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, payload)


class StoreUnavailable(QuickSellError):
    """The catalog or sale store failed (network, disk). The operation did not complete."""
    status_code = 503

    def __init__(self, message="Storage backend unavailable", payload=None):
        super().__init__(message, payload)

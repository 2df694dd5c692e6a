from typing import Optional


class CatalogError(Exception):
    """Base class for errors raised by the catalog store."""

    status_code: int = 400
    code: str = "catalog_error"

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        body = {"detail": self.message, "error": self.code}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(CatalogError):
    """Malformed or out-of-range input."""

    status_code = 422
    code = "validation_error"


class ReferentialError(ValidationError):
    """Input references a row that does not exist (e.g. an unknown category)."""

    code = "referential_error"


class NotAuthorized(CatalogError):
    status_code = 403
    code = "not_authorized"


class UniquenessViolation(CatalogError):
    """Duplicate SKU or duplicate (product, variant type, variant value)."""

    status_code = 409
    code = "uniqueness_violation"


class InvariantViolation(CatalogError):
    status_code = 409
    code = "invariant_violation"


class NotFound(CatalogError):
    status_code = 404
    code = "not_found"


class TransientStoreError(CatalogError):
    """Connectivity or timeout problem talking to the database. Safe to retry."""

    status_code = 503
    code = "transient_store_error"

"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidShareError(DomainException):
    """Share is outside the [0, 1] range"""

    pass


class ShareExceededError(DomainException):
    """Assigning the share would push an item's total above 1.0"""

    pass


class ReceiptNotFoundError(DomainException):
    """No receipt with the given id exists in the ledger"""

    pass


class MalformedReceiptError(DomainException):
    """Receipt input is missing a merchant or line items"""

    pass


class InvalidReceiptUpdateError(DomainException):
    """Receipt patch names an unknown field or clears a required one"""

    pass

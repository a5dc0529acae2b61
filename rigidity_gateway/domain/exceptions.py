"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Request data is malformed or out of range for a specific field"""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class NotFoundError(DomainException):
    """Referenced profile or expense does not exist for the caller"""

    pass


class UnauthorizedError(DomainException):
    """Caller identity is missing or was rejected by the auth service"""

    pass


class AuthServiceError(DomainException):
    """Auth service returned an error or is unavailable"""

    pass

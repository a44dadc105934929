class PortalException(Exception):
    """Base exception for the IELTS portal"""

    pass


class UnauthorizedException(PortalException):
    """Raised when credentials, token or session are not valid"""

    pass


class NotFoundException(PortalException):
    """Raised when resource not found"""

    pass


class ForbiddenException(PortalException):
    """Raised when the principal's role does not allow the action"""

    pass


class InvalidRoleException(ForbiddenException):
    """Raised when an account carries a role outside the known set"""

    pass


class ValidationException(PortalException):
    """Raised for business logic validation errors"""

    pass

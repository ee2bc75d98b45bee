# Domain errors raised by services and rendered as the response envelope


class PortfolioError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortfolioError):
    status_code = 400
    default_message = "Invalid request payload"


class AuthError(PortfolioError):
    status_code = 401
    default_message = "Invalid token"


class NotFoundError(PortfolioError):
    status_code = 404
    default_message = "Not found"


class ConflictError(PortfolioError):
    status_code = 409
    default_message = "Conflict"


class StorageError(PortfolioError):
    """Filesystem or database failure. The message is shown to clients, so keep it generic."""
    status_code = 500
    default_message = "Storage error"

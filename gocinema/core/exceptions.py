"""Domain errors raised by the service layer.

Each error carries a user-facing (Armenian) message and the HTTP status the
API answers with. The app-level handler in ``gocinema.main`` renders them as
``{"success": false, "error": message}``.
"""


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidInputError(ServiceError):
    status_code = 400


class PermissionDeniedError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class RateLimitedError(ServiceError):
    status_code = 429


class DeliveryFailedError(ServiceError):
    status_code = 502


GENERIC_ERROR = "Սխալ է տեղի ունեցել"
REQUIRED_FIELDS = "Բոլոր պարտադիր դաշտերը պետք է լրացված լինեն"

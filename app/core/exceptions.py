"""Domain errors raised by the services.

Each error carries the HTTP status it maps to; the handlers in
``app.middlewares.error_handler`` render them, so routers never translate
denials by hand.
"""


class NoticeBoardError(Exception):
    status_code = 500
    default_detail = "Internal Server Error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(NoticeBoardError):
    status_code = 404
    default_detail = "Not found"


class BadRequest(NoticeBoardError):
    status_code = 400
    default_detail = "Bad request"


class InvalidScope(BadRequest):
    default_detail = "Invalid notice recipients"


class AccessDenied(NoticeBoardError):
    status_code = 403
    default_detail = "Access denied"


class ForbiddenRole(AccessDenied):
    default_detail = "Your role is not allowed to perform this action"


class ForbiddenScope(AccessDenied):
    default_detail = "Target is outside your assigned classes or sections"


class ForbiddenOwnership(AccessDenied):
    default_detail = "You do not own this resource"


class Conflict(NoticeBoardError):
    status_code = 409
    default_detail = "Record already exists"


class AuthenticationFailed(NoticeBoardError):
    status_code = 401
    default_detail = "Could not validate credentials"

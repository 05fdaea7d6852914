"""
Error kinds shared by the engagement engines and the collaborators.

Every error carries a machine-readable ``kind`` and the HTTP status the
dispatch layer answers with. Engines raise them; only the API exception
handler translates them.
"""


class AppError(Exception):
    kind = "error"
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidOperation(AppError):
    kind = "invalid_operation"
    status_code = 400
    default_message = "Invalid operation"


class AlreadyExists(AppError):
    kind = "already_exists"
    status_code = 409
    default_message = "Already exists"


class AlreadyFriends(AlreadyExists):
    kind = "already_friends"
    default_message = "Users are already friends"


class DuplicateRequest(AlreadyExists):
    kind = "duplicate_request"
    default_message = "A pending friend request already exists between these users"


class AlreadyRemix(AlreadyExists):
    kind = "already_remix"
    default_message = "Content is already a remix of another post"


class NotFound(AppError):
    kind = "not_found"
    status_code = 404
    default_message = "Not found"


class NotAllowed(AppError):
    kind = "not_allowed"
    status_code = 403
    default_message = "Not allowed"


class Unauthenticated(AppError):
    kind = "unauthenticated"
    status_code = 401
    default_message = "Could not validate credentials"


class ConcurrencyConflict(AppError):
    kind = "conflict"
    status_code = 409
    default_message = "Operation in progress. Please wait and retry."

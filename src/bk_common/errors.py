"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Event
  3xxx: Auto-book
  4xxx: Processing pass

Policy failures of an auto-book (budget exceeded, window missed, duplicate)
are NOT exceptions: they are persisted outcomes. See src/bk_common/enums.py.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


class OperatorRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Operator account required", 403)


# --- 2xxx: Event ---

class EventNotFoundError(AppError):
    def __init__(self, event_id: str) -> None:
        super().__init__(2001, f"Event not found: {event_id}", 404)


class EventNotBookableError(AppError):
    def __init__(self, event_id: str, status: str) -> None:
        super().__init__(2002, f"Event {event_id} in status {status} cannot be auto-booked", 422)


class EventNotReleasableError(AppError):
    def __init__(self, event_id: str) -> None:
        super().__init__(2003, f"Event {event_id} is not an active COMING_SOON event", 422)


# --- 3xxx: Auto-book ---

class AutoBookNotFoundError(AppError):
    def __init__(self, auto_book_id: str) -> None:
        super().__init__(3001, f"Auto-book not found: {auto_book_id}", 404)


class DuplicateAutoBookError(AppError):
    def __init__(self, event_id: str) -> None:
        super().__init__(3002, f"An auto-book already exists for event {event_id}", 409)


class AutoBookNotCancellableError(AppError):
    def __init__(self, auto_book_id: str, status: str) -> None:
        super().__init__(
            3003, f"Auto-book {auto_book_id} in status {status} cannot be cancelled", 422
        )


class TicketsNotReleasedError(AppError):
    def __init__(self, event_id: str) -> None:
        super().__init__(3004, f"Tickets for event {event_id} have not been released yet", 422)


# --- 4xxx: Processing pass ---

class ProcessingPassError(AppError):
    """Candidate selection failed; the pass mutated no auto-book."""

    def __init__(self, detail: str) -> None:
        super().__init__(4001, f"Auto-book processing pass failed: {detail}", 503)


class UpstreamError(Exception):
    """Raised by an upstream availability source that could not answer.

    Not an AppError: it never reaches HTTP, the processor records it as an ERROR item.
    """


class BookingError(Exception):
    """Base class for errors that map onto a client-facing HTTP status."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"error": self.message}


class ValidationError(BookingError):
    status_code = 400


class NotFoundError(BookingError):
    status_code = 404


class SlotConflictError(BookingError):
    status_code = 400

    def __init__(self, message="Time slot is not available"):
        super().__init__(message)


class InvalidTransitionError(BookingError):
    status_code = 409

    def __init__(self, current, target):
        super().__init__(f"Cannot change booking status from {current} to {target}")
        self.current = current
        self.target = target


class ConcurrentUpdateError(BookingError):
    status_code = 409

    def __init__(self, message="Booking was modified by another request, please retry"):
        super().__init__(message)

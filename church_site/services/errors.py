"""
Domain errors raised by the service layer
"""

class EventNotFoundError(ValueError):
    """Registration submitted for an event that does not exist"""

class RegistrationClosedError(ValueError):
    """Event does not accept registrations"""

class CapacityError(ValueError):
    """Write would push an event past its maximum attendees"""

    def __init__(self, message: str, remaining: int = 0):
        super().__init__(message)
        self.remaining = remaining

class PasswordMismatchError(ValueError):
    """Membership form password and confirmation differ"""

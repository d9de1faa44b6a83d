
class BookkeepingError(Exception):
    """Base class for failures reported back to the caller."""

    status_code = 400
    name = 'BookkeepingError'

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'success': False, 'error': self.name, 'message': self.message}


class ValidationError(BookkeepingError):
    status_code = 400
    name = 'ValidationError'


class NotFound(BookkeepingError):
    status_code = 404
    name = 'NotFound'


class Conflict(BookkeepingError):
    status_code = 409
    name = 'Conflict'

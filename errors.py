# errors.py
"""Error kinds raised by the store and the command queue.

Views translate them: Forbidden -> 403, StorageError -> 500,
ValidationError -> 400 or a re-rendered form.
"""


class GreenhouseError(Exception):
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class Forbidden(GreenhouseError):
    """Ownership or role mismatch."""
    status_code = 403


class ValidationError(GreenhouseError):
    status_code = 400


class StorageError(GreenhouseError):
    """The database rejected a read or write."""
    status_code = 500

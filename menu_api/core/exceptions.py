# menu_api/core/exceptions.py


class MenuError(Exception):
    """Base class for menu domain errors. ``status_code`` is used at the HTTP boundary."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MenuNotFound(MenuError):
    status_code = 404


class MenuConflict(MenuError):
    """Duplicate slug/name/order, self-parenting, cycles, deleting a node with children."""

    status_code = 400


class MenuValidationError(MenuError):
    status_code = 400

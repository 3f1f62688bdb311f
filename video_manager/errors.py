class ActionError(Exception):
    """Error raised by an action handler, rendered as {"error": message}."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ActionError):
    status_code = 404

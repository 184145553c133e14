"""Domain exceptions raised by the log services."""


class InvalidAPIKeyError(Exception):
    """Raised when a log is submitted with an API key no active user owns."""

    def __init__(self, message: str = "ApiKey not valid!"):
        self.message = message
        super().__init__(message)


class LogNotFoundError(Exception):
    """Raised when a log id does not resolve to exactly one detail row."""

    def __init__(self, log_id: int):
        self.log_id = log_id
        super().__init__(f"Log {log_id} not found")

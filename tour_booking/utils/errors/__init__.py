class AppError(Exception):
    """Operational error with an HTTP status, rendered by the global error handler.

    `status` is "fail" for client errors (4xx) and "error" for server errors.
    """

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status = "fail" if 400 <= status_code < 500 else "error"
        self.is_operational = True

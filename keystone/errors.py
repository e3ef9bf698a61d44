from typing import Any, Optional


class KeystoneError(Exception):
    status_code = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(KeystoneError):
    status_code = 404


class ConflictError(KeystoneError):
    status_code = 409

    def __init__(self, detail: str, week: Optional[Any] = None) -> None:
        super().__init__(detail)
        self.week = week


class ValidationError(KeystoneError):
    status_code = 422

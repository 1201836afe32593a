from __future__ import annotations

from fastapi import HTTPException


class ValidationError(HTTPException):
    def __init__(self, errors: dict[str, list[str]], message: str = "The given data was invalid."):
        self.errors = {key: list(messages) for key, messages in errors.items()}
        super().__init__(status_code=422, detail={"message": message, "errors": self.errors})

    @classmethod
    def single(cls, attribute: str, message: str) -> "ValidationError":
        return cls({attribute: [message]})


class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "Insufficient permissions"):
        super().__init__(status_code=403, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Form not found"):
        super().__init__(status_code=404, detail=detail)


class StorageError(HTTPException):
    def __init__(self, detail: str = "Storage error"):
        super().__init__(status_code=500, detail=detail)

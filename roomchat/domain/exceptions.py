# roomchat/domain/exceptions.py


class DomainError(Exception):
    status_code: int = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class UnauthorizedError(DomainError):
    status_code = 401


class ForbiddenError(DomainError):
    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class DomainValidationError(DomainError):
    status_code = 422


class EmailSendError(DomainError):
    status_code = 502

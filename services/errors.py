"""서비스 계층 예외 (middlewares/error_handler.py 에서 HTTP 응답으로 변환)"""


class ServiceError(Exception):
    status_code = 400
    code = "SERVICE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404
    code = "NOT_FOUND"


class SuggestionAlreadyAppliedError(ServiceError):
    status_code = 409
    code = "SUGGESTION_ALREADY_APPLIED"


class InvalidRuleError(ServiceError):
    status_code = 422
    code = "INVALID_RULE"

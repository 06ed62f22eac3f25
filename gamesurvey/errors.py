"""
Exceptions raised by the survey API and its storage layer.

Every error carries the HTTP status it maps to; the FastAPI exception handler in
``gamesurvey.main`` renders them as ``{"success": false, "error": ...}``.
"""


class SurveyAPIError(Exception):
    """Base error for the survey API"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingParameterError(SurveyAPIError):
    """A required identifier was not supplied"""

    def __init__(self, parameter: str):
        super().__init__(f"{parameter} is required")


class RecordNotFoundError(SurveyAPIError):
    """A looked-up record does not exist"""

    status_code = 404

    def __init__(self, kind: str):
        super().__init__(f"{kind} not found")


class InvalidActionError(SurveyAPIError):
    """The action name is not routed"""

    def __init__(self):
        super().__init__("Invalid action")


class StoreError(SurveyAPIError):
    """A storage operation failed"""

    status_code = 500

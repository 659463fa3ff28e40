"""
Domain errors raised by engines and validators.
The API maps each class to an HTTP status code.
"""


class PitchsideError(Exception):
    """Base class for all domain errors"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PitchsideError):
    status_code = 400


class ScoringError(PitchsideError):
    """Scoring operation not allowed in the match's current state"""

    status_code = 400


class PermissionDeniedError(PitchsideError):
    status_code = 403


class NotFoundError(PitchsideError):
    status_code = 404


class ConflictError(PitchsideError):
    status_code = 409

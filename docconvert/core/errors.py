"""Error taxonomy shared by services and the HTTP boundary.

Every failure a request can end with is one of three kinds. Each carries the
stage that raised it so the response (and the log line) keeps that context.
"""
from typing import Any, Dict, Optional


class DocumentServiceError(Exception):
    code = "error"
    status_code = 500

    def __init__(self, message: str, stage: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message, "code": self.code}
        if self.stage:
            body["stage"] = self.stage
        if self.detail:
            body["details"] = self.detail
        return body


class ValidationError(DocumentServiceError):
    """Missing or insufficient inputs."""
    code = "validation_error"
    status_code = 400


class UploadTooLargeError(ValidationError):
    status_code = 413


class ProcessingError(DocumentServiceError):
    """Input bytes could not be decoded, or output could not be written."""
    code = "processing_error"
    status_code = 500


class ConfigurationError(DocumentServiceError):
    """A required external credential or engine is not available."""
    code = "configuration_error"
    status_code = 503

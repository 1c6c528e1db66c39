"""
Resume processing errors.
Routers translate these into HTTP responses; services only raise them.
"""


class ResumeProcessingError(Exception):
    """Base class for everything that can go wrong while ingesting a resume."""


class UnsupportedFileTypeError(ResumeProcessingError):
    def __init__(self, media_type: str = None):
        self.media_type = media_type
        super().__init__("Unsupported file type")


class DocumentExtractionError(ResumeProcessingError):
    """The document matched a known type but could not be decoded."""


class LLMNotConfiguredError(ResumeProcessingError):
    pass


class LLMRequestError(ResumeProcessingError):
    """The model API call itself failed."""


class EmptyModelOutputError(ResumeProcessingError):
    def __init__(self):
        super().__init__("No output from model")


class ResponseParseError(ResumeProcessingError):
    """Model output could not be parsed as JSON. Keeps the extracted text for diagnosis."""

    def __init__(self, reason: str, extracted: str):
        self.reason = reason
        self.extracted = extracted
        super().__init__(f"Failed to parse model output: {reason}\nExtracted JSON:\n{extracted}")


class SchemaMismatchError(ResumeProcessingError):
    """Parsed JSON does not have the shape we asked the model for."""

    def __init__(self, details: str):
        self.details = details
        super().__init__(f"Model output does not match the resume schema: {details}")

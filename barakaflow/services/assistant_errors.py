class AssistantError(Exception):
    """Base for assistant failures; ``retryable`` tells the UI whether to offer a retry."""

    retryable = True

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AssistantNotConfigured(AssistantError):
    retryable = False


class AssistantUpstreamError(AssistantError):
    """The model API could not be reached or answered with an error."""


class AssistantResponseError(AssistantError):
    """The model answered, but not with the JSON shape that was asked for."""

"""Exceptions shared by the generation clients."""


class LLMError(Exception):
    """Raised when communication with the text generation service fails."""

    pass

"""Shared error types for the completion translation layer."""


class CompletionError(Exception):
    """Base error for all failures raised before or during dispatch."""


class InputError(CompletionError):
    """The request cannot be translated for the provider and must be corrected."""


class ConfigurationError(CompletionError):
    """The handler is missing configuration required to reach the provider."""

    def __init__(self, detail: str, env_var: str | None = None) -> None:
        self.detail = detail
        self.env_var = env_var
        super().__init__(detail)

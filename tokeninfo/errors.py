class TokenInfoError(Exception):
    """Base class for errors raised inside tokeninfo."""
    pass


class MissingParameterError(TokenInfoError):
    """A required request parameter was absent or blank."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"Missing {parameter}")


class UpstreamError(TokenInfoError):
    """An upstream data source failed. Never escapes a source adapter."""
    pass


class CacheConnectionError(TokenInfoError):
    """Raised when the configured shared cache backend is unreachable."""
    pass

from fastapi import HTTPException

# All errors subclass HTTPException so they can be raised from any layer and
# still reach the client as {"error": detail} with the right status code.


class RequestError(HTTPException):
    """Malformed or disallowed inbound request."""
    def __init__(self, detail: str, status_code: int = 400):
        super().__init__(status_code=status_code, detail=detail)


class AuthenticationError(RequestError):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail, status_code=401)


class ConfigurationError(HTTPException):
    """A required server-side secret is absent."""
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)


class UpstreamError(HTTPException):
    """The generation service failed or returned nothing usable."""
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)


class ParseError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)


class ValidationError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)

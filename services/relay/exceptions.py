from fastapi import HTTPException

class RelayError(HTTPException):
    """Base for every error the relay reports as `{"error": detail}`."""

class InvalidInput(RelayError):
    def __init__(self, detail: str = "`message` is required."):
        super().__init__(status_code=400, detail=detail)

class MethodNotAllowed(RelayError):
    def __init__(self, detail: str = "Method not allowed. Use POST."):
        super().__init__(status_code=405, detail=detail)

class ServerMisconfigured(RelayError):
    def __init__(self, detail: str = "Server misconfigured: missing HF_TOKEN."):
        super().__init__(status_code=500, detail=detail)

class UpstreamError(RelayError):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class UpstreamEmptyOutput(RelayError):
    def __init__(self, detail: str = "Model returned empty output."):
        super().__init__(status_code=502, detail=detail)

class UnexpectedServerError(RelayError):
    def __init__(self, detail: str = "Unexpected server error."):
        super().__init__(status_code=500, detail=detail)

from fastapi import Request
from fastapi.responses import JSONResponse


class StatusCheckError(Exception):
    """Base exception for status engine errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status: int = 500,
        details: dict | None = None,
    ):
        self.code = code
        self.message = message
        self.status = status
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        result = {
            "error": {
                "code": self.code,
                "message": self.message,
                "status": self.status,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class ValidationError(StatusCheckError):
    """Missing or blank query parameter. The only error that reaches a caller."""

    def __init__(self, message: str = "Service name parameter is required", details: dict | None = None):
        super().__init__(code="validation_error", message=message, status=400, details=details)

    def to_dict(self) -> dict:
        # Public status endpoint contract: flat {"error": "<message>"}
        return {"error": self.message}


class SourceUnavailableError(StatusCheckError):
    def __init__(self, message: str = "Crowd-sourced outage reports are not available in this deployment."):
        super().__init__(code="source_unavailable", message=message, status=503)


class CascadeExhaustedError(StatusCheckError):
    """Every configured domain was tried and none produced a report set."""

    def __init__(self, service_name: str, failures: dict[str, str]):
        self.service_name = service_name
        self.failures = failures
        super().__init__(
            code="cascade_exhausted",
            message=f"All {len(failures)} outage report domains failed for {service_name}",
            status=502,
            details={"failures": failures},
        )


class ProbeFailure(StatusCheckError):
    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(code="probe_failed", message=message, status=502, details={"url": url})


class InvalidProbeURLError(ProbeFailure):
    def __init__(self, url: str, message: str = "Invalid URL"):
        super().__init__(url=url, message=message)
        self.code = "invalid_url"
        self.status = 400


async def status_check_error_handler(request: Request, exc: StatusCheckError) -> JSONResponse:
    """Global exception handler for StatusCheckError and subclasses."""
    return JSONResponse(status_code=exc.status, content=exc.to_dict())

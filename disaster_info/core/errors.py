"""Error taxonomy shared by the lookup pipeline and the API layer."""

from datetime import datetime, timezone
from typing import Optional


class DisasterInfoError(Exception):
    """Base for every classified failure."""

    code = "DISASTER_INFO_ERROR"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "statusCode": self.http_status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class InvalidInputError(DisasterInfoError):
    code = "INVALID_INPUT"
    http_status = 400

    def __init__(self, message: str = "Invalid input format", field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class ExternalApiError(DisasterInfoError):
    """Upstream failure tagged with the HTTP status (if any) and the API name."""

    code = "EXTERNAL_API_ERROR"
    http_status = 502

    def __init__(
        self,
        message: str = "Error communicating with external API",
        status_code: Optional[int] = None,
        api_name: Optional[str] = None,
        no_response: bool = False,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.api_name = api_name
        self.no_response = no_response

    @property
    def is_timeout(self) -> bool:
        """Request never got an HTTP answer (timeout or connection failure)."""
        return self.no_response and self.status_code is None

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.api_name:
            data["apiName"] = self.api_name
        if self.status_code is not None:
            data["upstreamStatus"] = self.status_code
        return data


class InternalError(DisasterInfoError):
    code = "INTERNAL_ERROR"
    http_status = 500

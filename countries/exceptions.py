from rest_framework import status
from rest_framework.exceptions import APIException


class CountryAPIError(APIException):
    """
    Base error for the countries API.
    Subclasses carry the JSON `error` message and optional `details`/`country`
    context that the exception handler puts on the wire.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, error=None, details=None, country=None):
        self.error = error or self.default_detail
        self.details = details
        self.country = country
        super().__init__(self.error)

    def as_payload(self):
        payload = {"error": self.error}
        if self.country is not None:
            payload["country"] = self.country
        if self.details is not None:
            payload["details"] = self.details
        return payload


class UpstreamUnavailable(CountryAPIError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "External data source unavailable"

    def __init__(self, source):
        self.source = source
        super().__init__(details=f"Could not fetch data from {source}")


class ValidationFailed(CountryAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"

    def __init__(self, details, country=None):
        super().__init__(details=details, country=country)


class CountryNotFound(CountryAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Country not found"

    def __init__(self, name):
        self.name = name
        super().__init__()


class SummaryImageNotFound(CountryAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Summary image not found"

"""Error taxonomy for the geocoding and forecast clients."""


class LookupClientError(Exception):
    """Base class for failures raised by the lookup clients."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(LookupClientError):
    """The geocoding provider returned no match for the query."""


class NetworkError(LookupClientError):
    """Transport failure or non-success HTTP status."""


class MalformedResponseError(NetworkError):
    """The provider answered, but the payload violates its documented shape."""

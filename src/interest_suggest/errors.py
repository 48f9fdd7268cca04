"""Error taxonomy for interest suggestions."""


class SuggestError(Exception):
    """Base class for all interest suggestion errors."""

    user_message = "Something went wrong"


class FetchError(SuggestError):
    """The remote autocomplete service could not produce a result set."""


class NetworkError(FetchError):
    """Transport failure or non-2xx status from the autocomplete service."""

    user_message = "Failed to fetch suggestions. Please try again."

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BadFormatError(FetchError):
    """
    The service answered 2xx but the body does not match the contract.

    Not retried within the session, although repeating the same query
    will reach the service again since nothing is cached for it.
    """

    user_message = "Invalid response format from server"

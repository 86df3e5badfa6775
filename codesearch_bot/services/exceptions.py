"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class SearchServiceError(ServiceError):
    """The search request failed in transport or returned an unreadable payload."""

"""
Service Errors

Error taxonomy shared by the gateway, the recipe services and the API layer.
Each error carries a stable code and the HTTP status the API answers with.
"""


class RecipeServiceError(Exception):
    """Base class for every error the recipe services raise."""
    code = 'error'
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self):
        return {'error': self.code, 'message': self.message, 'details': self.details}


class NotFound(RecipeServiceError):
    """A local entity does not exist (or is not visible to the caller)."""
    code = 'not_found'
    status_code = 404


class ValidationFailed(RecipeServiceError):
    """Malformed input or a cross-entity mismatch."""
    code = 'validation_failed'
    status_code = 400


class AccessDenied(RecipeServiceError):
    """Visibility or ownership violation."""
    code = 'access_denied'
    status_code = 403


class Conflict(RecipeServiceError):
    """A store-level uniqueness constraint rejected the write."""
    code = 'conflict'
    status_code = 409


class UpstreamError(RecipeServiceError):
    """Base class for failures of the recipe content provider."""
    code = 'upstream_error'
    status_code = 502


class UpstreamRateLimited(UpstreamError):
    """The call budget is exhausted, or the provider answered 429."""
    code = 'upstream_rate_limited'
    status_code = 429


class UpstreamNotFound(UpstreamError):
    """The provider has no recipe with the requested id."""
    code = 'upstream_not_found'
    status_code = 404


class UpstreamUnavailable(UpstreamError):
    """Transport failure or non-2xx answer from the provider."""
    code = 'upstream_unavailable'
    status_code = 502

    def __init__(self, message, status=None, details=None):
        details = dict(details or {})
        if status is not None:
            details['status'] = status
        super().__init__(message, details)
        self.status = status

class InvalidIncidentError(ValueError):
    """Malformed incident input or query filter."""


class IncidentNotFoundError(LookupError):
    """Incident id does not exist in the store."""


class CameraNotFoundError(LookupError):
    """Camera id does not exist in the store."""


class StoreUnavailableError(RuntimeError):
    """Underlying store call failed."""


class DashboardGatewayError(RuntimeError):
    """Dashboard client could not complete a request against the API."""

# domain errors shared by services and routers
# every portal failure maps to one error code and one http status


class PortalError(Exception):
    """base class for failures surfaced to the caller as a dismissable error"""

    error_code = "portal_error"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class NotFound(PortalError):
    """referenced client/case/conversation/appointment/invoice does not exist"""

    error_code = "not_found"
    status_code = 404


class InvalidInput(PortalError):
    """rejected before any store call (empty content, missing selection, ...)"""

    error_code = "invalid_input"
    status_code = 422


class StoreError(PortalError):
    """the document store call failed or timed out; never retried automatically"""

    error_code = "store_error"
    status_code = 503


class PartialSideEffectFailure(PortalError):
    """primary write succeeded but a secondary notification write failed.
    logged, never raised to the caller."""

    error_code = "partial_side_effect_failure"

"""
Custom exceptions for the wire routing core
"""


class WireRouterError(Exception):
    """Base exception for all wire router errors"""
    pass


class ConfigurationError(WireRouterError, ValueError):
    """Raised when router configuration is invalid"""
    pass


class InvalidStateTransitionError(WireRouterError):
    """Raised when a wire is moved to a state its lifecycle does not allow"""
    pass


class WireNotFoundError(WireRouterError, KeyError):
    """Raised when a wire id is not known to the registry"""
    pass


class JunctionNotFoundError(WireRouterError, KeyError):
    """Raised when a junction id is not known to the junction manager"""
    pass


class ExporterError(WireRouterError):
    """Raised when routing results cannot be exported"""
    pass

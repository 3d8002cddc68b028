"""Errors raised while building or running a fog deployment."""


class FogSimError(Exception):
    """Base class for simulator errors."""
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidTopologyError(FogSimError):
    """Device tree is malformed (cycle, unknown parent, second root...)."""


class UnknownModuleError(FogSimError):
    """An edge, selectivity or loop names a module that was never added."""
    def __init__(self, module, where=None):
        msg = "Unknown module: {}".format(module)
        if where is not None:
            msg += " (referenced by {})".format(where)
        super().__init__(msg)
        self.module = module


class InvalidEdgeError(FogSimError):
    """Application edge is inconsistent with its kind or the frozen graph."""


class UnplaceableModuleError(FogSimError):
    """Placement strategy could not find a device for a module."""
    def __init__(self, module, reason):
        super().__init__("Cannot place module {}: {}".format(module, reason))
        self.module = module


class UnroutableTupleError(FogSimError):
    """A tuple has no reachable destination from its current device."""
    def __init__(self, tup, reason):
        super().__init__("Cannot route {}: {}".format(tup, reason))
        self.tuple = tup

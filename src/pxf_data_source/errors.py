"""Exception types raised by the PXF data source."""


class PxfError(Exception):
    """Base class for all PXF data source errors."""


class PxfUriSyntaxError(PxfError, ValueError):
    """A PXF connection string does not follow the URI grammar."""

    def __init__(self, message, uri=None, fragment=None):
        super().__init__(message)
        self.uri = uri
        self.fragment = fragment


class PxfConfigurationError(PxfError, ValueError):
    """Required options are missing or invalid."""


class PxfCatalogError(PxfError, ValueError):
    """The fragment catalog returned by PXF could not be decoded."""


class PxfSeedUnavailableError(PxfError, RuntimeError):
    """No distributed transaction identifier is available for partitioning."""


class PxfInternalError(PxfError, RuntimeError):
    """An internal invariant was violated upstream."""

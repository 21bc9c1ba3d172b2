"""Export error types."""


class ServiceExportError(Exception):
    """Base class for all export failures."""


class ConsistencyFault(ServiceExportError):
    """A reference cannot be resolved against the fetched revision set."""


class UnsupportedCombination(ServiceExportError):
    """The requested mode and output format cannot be combined."""


class MalformedInput(ServiceExportError):
    """A fetched object violates an invariant the export depends on."""


class FetchError(ServiceExportError):
    """Live objects could not be fetched from the cluster or a file."""


class RulesError(ServiceExportError):
    """A normalization rules file could not be loaded."""

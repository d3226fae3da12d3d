class BuildError(RuntimeError):
    """A build could not be started or was aborted; tool diagnostics are never raised."""

class ExporterError(Exception):
    """Base exception for podman-exporter."""

    pass


class EngineError(ExporterError):
    """Raised when the container engine cannot be queried (transport, HTTP or protocol failure)."""

    pass


class CollectorError(ExporterError):
    """Raised when a collection cycle is aborted before the registry was fully updated."""

    pass

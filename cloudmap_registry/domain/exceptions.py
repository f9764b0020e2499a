"""Domain-specific exceptions for the Cloud Map registry."""


class RegistryError(Exception):
    """Base exception for all registry errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidArgumentError(RegistryError):
    """Raised when a caller supplies an unusable argument."""

    pass


class ConfigurationMissingError(RegistryError):
    """Raised at startup when required configuration is absent."""

    def __init__(self, missing: list[str]):
        super().__init__(
            f"cloudmap-registry: can't be used without valid namespace options "
            f"(missing: {', '.join(missing)})",
            details={"missing": missing},
        )
        self.missing = missing


class DirectoryUnavailableError(RegistryError):
    """Raised when a call to the service directory fails or times out."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        service_name: str | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.service_name = service_name
        if operation:
            self.details["operation"] = operation
        if service_name:
            self.details["service_name"] = service_name


class ServiceNotFoundError(RegistryError):
    """Raised when the directory has no service with the given name."""

    def __init__(self, service_name: str):
        super().__init__(
            f"Service '{service_name}' not found in directory",
            details={"service_name": service_name},
        )
        self.service_name = service_name


class WatcherStoppedError(RegistryError):
    """Raised by a watcher once it has been stopped."""

    def __init__(self, service_name: str | None = None):
        super().__init__("result chan closed")
        self.service_name = service_name
        if service_name:
            self.details["service_name"] = service_name

class KubeForwardError(Exception):
    """Base exception for kubeforward errors."""
    pass


class KubectlError(KubeForwardError):
    """Raised when a kubectl command needed to continue fails."""

    def __init__(self, command, message):
        super().__init__(f"{' '.join(command)}: {message}")
        self.command = command
        self.message = message


class LaunchError(KubeForwardError):
    """Raised when a forward or log process cannot be started."""
    pass


class ConfigurationError(KubeForwardError):
    """Raised when there's a configuration issue."""
    pass

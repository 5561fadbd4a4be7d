"""
Error taxonomy for the container core.

Per-entry errors (RecordError, RecordWriteFailed) are handled while
enumerating containers and never reach the API. Everything else is raised
to the caller and mapped to an HTTP status in ``zdock_api.main``.
"""


class ZDockError(Exception):
    """Base class for every error raised by the container core."""

    status_code = 500

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.message = message
        self.output = output


class DirectoryUnavailable(ZDockError):
    def __init__(self, path: str, reason: str = "", missing: bool = False):
        message = f"Container state directory {path} unavailable"
        super().__init__(f"{message}: {reason}" if reason else message)
        self.path = path
        self.missing = missing


class RecordError(ZDockError):
    def __init__(self, name: str, reason: str):
        super().__init__(f"Container record {name!r}: {reason}")
        self.name = name


class RecordUnreadable(RecordError):
    pass


class RecordCorrupt(RecordError):
    pass


class RecordWriteFailed(ZDockError):
    def __init__(self, name: str, reason: str):
        super().__init__(f"Failed to write container record {name!r}: {reason}")
        self.name = name


class ContainerNotFound(ZDockError):
    status_code = 404

    def __init__(self, key: str):
        super().__init__(f"Container {key!r} not found")
        self.key = key


class CommandFailed(ZDockError):
    def __init__(self, op: str, output: str, exit_code: int | None = None):
        super().__init__(f"{op} failed (exit code {exit_code})", output=output)
        self.op = op
        self.exit_code = exit_code


class CreateFailed(CommandFailed):
    def __init__(self, output: str, exit_code: int | None = None):
        super().__init__("create", output, exit_code)


class NameUnresolved(ZDockError):
    def __init__(self, output: str):
        super().__init__("Could not resolve the name of the created container", output=output)


class CreationTimedOut(ZDockError):
    status_code = 504

    def __init__(self, key: str, timeout: float):
        super().__init__(f"Container {key!r} did not appear within {timeout:g}s")
        self.key = key
        self.timeout = timeout


class CommandTimedOut(ZDockError):
    status_code = 504

    def __init__(self, op: str, timeout: float, output: str = ""):
        super().__init__(f"{op} did not finish within {timeout:g}s", output=output)
        self.op = op
        self.timeout = timeout


class CommandInvocationFailed(ZDockError):
    def __init__(self, op: str, reason: str):
        super().__init__(f"Could not invoke {op}: {reason}")
        self.op = op

"""
Build errors.

Nothing here is recovered locally - every error bubbles up
to site_builder.main, which reports it and exits with 1.
"""


class BuildError(Exception):
    """Base class for everything the build can fail with"""


class MissingSourceDocument(BuildError):
    """index.html is absent or unreadable"""

    def __init__(self, path, reason: str = "not found"):
        self.path = path
        super().__init__(f"Source document {path} {reason}")


class MalformedDocument(BuildError):
    """The inline script block could not be located"""


class BundlingFailure(BuildError):
    """esbuild is missing, failed, or produced nothing"""

    def __init__(self, entry_point, message: str, stderr: str = ""):
        self.entry_point = entry_point
        self.stderr = stderr
        detail = f"Bundling {entry_point} failed: {message}"
        if stderr:
            detail = f"{detail}\n{stderr.strip()}"
        super().__init__(detail)


class FilesystemFailure(BuildError):
    """Any read/write/copy/mkdir/remove that went wrong"""

    def __init__(self, operation: str, path, error: Exception = None):
        self.operation = operation
        self.path = path
        message = f"Could not {operation} {path}"
        if error is not None:
            message = f"{message}: {error}"
        super().__init__(message)

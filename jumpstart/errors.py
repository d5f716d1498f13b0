"""Exception hierarchy for Jumpstart.

Every failure an operator can see derives from :class:`JumpstartError`.  Each
subclass carries a short ``label`` that the CLI prints next to the message, and
failures caused by an external command keep the command line and its stderr
for diagnostics.
"""

from __future__ import annotations


class JumpstartError(Exception):
    """Base class for all Jumpstart errors."""

    label = "Error"

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class ValidationError(JumpstartError):
    """Raised when user input is rejected before any side effect."""

    label = "ValidationError"


class InvalidName(ValidationError):
    label = "InvalidName"


class InvalidPort(ValidationError):
    label = "InvalidPort"


# ---------------------------------------------------------------------------
# Precondition violations
# ---------------------------------------------------------------------------


class ProjectNotFound(JumpstartError):
    label = "ProjectNotFound"


class ProjectExists(JumpstartError):
    label = "ProjectExists"


class ContainerNotRunning(JumpstartError):
    label = "ContainerNotRunning"


class TargetFileMissing(JumpstartError):
    label = "TargetFileMissing"


class PluginsDirMissing(JumpstartError):
    label = "PluginsDirMissing"


class PluginNotFound(JumpstartError):
    label = "PluginNotFound"


class EntryPointMissing(JumpstartError):
    label = "EntryPointMissing"


# ---------------------------------------------------------------------------
# External command failures
# ---------------------------------------------------------------------------


class ScaffoldFailure(JumpstartError):
    label = "ScaffoldFailure"


class DirectoryMissing(JumpstartError):
    label = "DirectoryMissing"


class FilesystemError(JumpstartError):
    """A host file or directory could not be created, read, or removed."""

    label = "FilesystemError"


class PatchFailure(JumpstartError):
    label = "PatchFailure"


class RuntimeCommandFailed(JumpstartError):
    """A container runtime command ran but exited non-zero."""

    label = "RuntimeCommandFailed"


class PluginError(JumpstartError):
    """A plugin file exists but its definition is malformed."""

    label = "PluginError"


class RuntimeUnavailable(JumpstartError):
    """The container runtime cannot be reached.  Always fatal."""

    label = "RuntimeUnavailable"

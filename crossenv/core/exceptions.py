"""
Centralized exception hierarchy for crossenv.

The resolution and dispatch core raises these; it never prints or exits.
Presenting them to the user is the job of the CLI layer.
"""

from typing import Iterable, Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class CrossEnvError(Exception):
    """Base exception for all crossenv errors."""

    pass


# ============================================================================
# Target Exceptions
# ============================================================================


class TargetError(CrossEnvError):
    """Base exception for target-related errors."""

    pass


class UnknownTargetError(TargetError):
    """Raised when a target identifier is not in the target registry."""

    def __init__(self, target: str, valid_targets: Iterable[str] = ()):
        self.target = target
        self.valid_targets = list(valid_targets)
        msg = f"Unknown target: {target!r}"
        if self.valid_targets:
            msg += f". Available targets: {', '.join(self.valid_targets)}"
        super().__init__(msg)


# ============================================================================
# Dispatch Exceptions
# ============================================================================


class DispatchError(CrossEnvError):
    """Base exception for build plan errors."""

    pass


class UnsupportedClassificationError(DispatchError):
    """Raised when no build plan exists for a project classification."""

    def __init__(self, classification, detail: Optional[str] = None):
        self.classification = classification
        name = getattr(classification, "value", classification)
        msg = f"No build plan for project type: {name}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class UnmappedEcosystemTargetError(DispatchError):
    """Raised when a target has no ecosystem-native translation (e.g. Go on illumos)."""

    def __init__(
        self, ecosystem: str, target: str, supported_targets: Iterable[str] = ()
    ):
        self.ecosystem = ecosystem
        self.target = target
        self.supported_targets = list(supported_targets)
        msg = f"Target {target!r} is not supported by {ecosystem}"
        if self.supported_targets:
            msg += f". Supported targets: {', '.join(self.supported_targets)}"
        super().__init__(msg)


# ============================================================================
# Configuration / Execution Exceptions
# ============================================================================


class ConfigError(CrossEnvError):
    """Configuration parsing or validation error."""

    pass


class ExecutionError(CrossEnvError):
    """Raised when a build step cannot be started."""

    pass

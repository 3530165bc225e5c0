"""
Camera acquisition failures.

Host-specific error names are mapped to a closed ErrorKind set in one
place (classify); everything above this module works with ErrorKind only.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from visionmate.utils.logger import get_logger

logger = get_logger(__name__)


class ErrorKind(Enum):
    """
    Closed set of acquisition failure classes.

    Values are the stable codes shown to collaborators.
    """

    PERMISSION_DENIED = "PERMISSION_DENIED"
    NO_CAMERA_DEVICE = "NO_CAMERA"
    CAMERA_BUSY = "CAMERA_BUSY"
    NOT_SUPPORTED = "NOT_SUPPORTED"
    CONSTRAINT_MISMATCH = "UNSUPPORTED_CONSTRAINTS"
    REQUEST_ABORTED = "REQUEST_ABORTED"
    GENERIC = "GENERIC_ERROR"

    @property
    def aborts_sequence(self) -> bool:
        """True if no further profile should be tried after this failure."""
        return self is not ErrorKind.CONSTRAINT_MISMATCH

    @property
    def default_message(self) -> str:
        return _DEFAULT_MESSAGES[self]


_DEFAULT_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.PERMISSION_DENIED: (
        "Camera permission was denied. "
        "Please allow camera access in your system settings."
    ),
    ErrorKind.NO_CAMERA_DEVICE: "No camera device was found on this device.",
    ErrorKind.CAMERA_BUSY: "Camera is already in use by another application.",
    ErrorKind.NOT_SUPPORTED: "Camera is not supported on this device.",
    ErrorKind.CONSTRAINT_MISMATCH: "Camera does not support the requested settings.",
    ErrorKind.REQUEST_ABORTED: "Camera access request was interrupted.",
    ErrorKind.GENERIC: "Camera access failed.",
}

# Host error names, as reported by media-capture backends
_NATIVE_NAME_TO_KIND: Dict[str, ErrorKind] = {
    "NotAllowedError": ErrorKind.PERMISSION_DENIED,
    "PermissionDeniedError": ErrorKind.PERMISSION_DENIED,
    "SecurityError": ErrorKind.PERMISSION_DENIED,
    "NotFoundError": ErrorKind.NO_CAMERA_DEVICE,
    "DevicesNotFoundError": ErrorKind.NO_CAMERA_DEVICE,
    "NotReadableError": ErrorKind.CAMERA_BUSY,
    "TrackStartError": ErrorKind.CAMERA_BUSY,
    "OverconstrainedError": ErrorKind.CONSTRAINT_MISMATCH,
    "ConstraintNotSatisfiedError": ErrorKind.CONSTRAINT_MISMATCH,
    "AbortError": ErrorKind.REQUEST_ABORTED,
    "NotSupportedError": ErrorKind.NOT_SUPPORTED,
    "TypeError": ErrorKind.NOT_SUPPORTED,
}


class NativeError(Exception):
    """
    Raw failure reported by the host capture backend.

    Only the name is meaningful to classify(); the message is kept for
    logs and for the generic fallback text.
    """

    def __init__(self, name: str, message: str = ""):
        super().__init__(message or name)
        self.name = name
        self.message = message

    def __repr__(self) -> str:
        return f"NativeError(name={self.name!r}, message={self.message!r})"


class AcquisitionError(Exception):
    """Terminal, classified failure of an acquire call."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None, profile=None):
        self.kind = kind
        self.message = message or kind.default_message
        self.profile = profile
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.kind.value

    @classmethod
    def from_native(cls, native_error: Any, profile=None) -> "AcquisitionError":
        """Classify a raw host failure and wrap it."""
        if isinstance(native_error, AcquisitionError):
            return native_error

        kind = classify(native_error)
        if kind is ErrorKind.GENERIC:
            message = f"Camera access failed: {_describe(native_error)}"
        else:
            message = kind.default_message

        logger.debug(f"Classified {type(native_error).__name__} as {kind.name}")
        error = cls(kind, message, profile=profile)
        if isinstance(native_error, BaseException):
            error.__cause__ = native_error
        return error

    def __repr__(self) -> str:
        return f"AcquisitionError(kind={self.kind.name}, message={self.message!r})"


def classify(native_error: Any) -> ErrorKind:
    """
    Map a raw host failure to an ErrorKind.

    Total: anything unrecognized, including None and objects without a
    usable name, maps to GENERIC. Never raises.

    Args:
        native_error: Whatever the host raised

    Returns:
        ErrorKind for the failure
    """
    try:
        if isinstance(native_error, AcquisitionError):
            return native_error.kind

        name = getattr(native_error, "name", None)
        if not isinstance(name, str):
            return ErrorKind.GENERIC

        return _NATIVE_NAME_TO_KIND.get(name, ErrorKind.GENERIC)
    except Exception:
        # Host objects with hostile attribute access still classify
        return ErrorKind.GENERIC


def _describe(native_error: Any) -> str:
    try:
        text = str(native_error)
    except Exception:
        text = ""
    return text or type(native_error).__name__


@dataclass
class ErrorGuidance:
    """User-facing explanation and remediation steps for a failure."""

    title: str
    message: str
    instructions: List[str] = field(default_factory=list)
    can_retry: bool = True
    show_browser_help: bool = False

    def as_speech(self) -> str:
        """Flatten the guidance into one narration string."""
        steps = " ".join(
            f"Step {index}: {step}." for index, step in enumerate(self.instructions, 1)
        )
        parts = [f"{self.title}.", self.message]
        if steps:
            parts.append(steps)
        if self.can_retry:
            parts.append("You can try again.")
        return " ".join(parts)


_GUIDANCE: Dict[ErrorKind, ErrorGuidance] = {
    ErrorKind.PERMISSION_DENIED: ErrorGuidance(
        title="Camera Access Required",
        message="VisionMate needs camera access to function properly.",
        instructions=[
            "Open your system or browser camera permissions",
            "Select \"Allow\" for camera access",
            "Restart VisionMate and try again",
        ],
        can_retry=True,
        show_browser_help=True,
    ),
    ErrorKind.NO_CAMERA_DEVICE: ErrorGuidance(
        title="No Camera Found",
        message="No camera device was detected on this device.",
        instructions=[
            "Check if your camera is properly connected",
            "Try again after reconnecting it",
            "Ensure other apps aren't using the camera",
        ],
    ),
    ErrorKind.CAMERA_BUSY: ErrorGuidance(
        title="Camera In Use",
        message="Your camera is currently being used by another application.",
        instructions=[
            "Close other apps that might be using the camera",
            "Close other browser tabs with camera access",
            "Try again after closing camera applications",
        ],
    ),
    ErrorKind.NOT_SUPPORTED: ErrorGuidance(
        title="Camera Not Supported",
        message="Your device doesn't support camera access.",
        instructions=[
            "Check that a camera backend is installed",
            "Ensure you're using a secure connection when running in a browser",
            "Update your system to the latest version",
        ],
        can_retry=False,
        show_browser_help=True,
    ),
    ErrorKind.CONSTRAINT_MISMATCH: ErrorGuidance(
        title="Camera Settings Error",
        message="Your camera doesn't support the requested settings.",
        instructions=[
            "Allow lower camera quality in settings",
            "Try again",
            "Check if your camera drivers are up to date",
        ],
    ),
}


def get_error_guidance(error: Optional[AcquisitionError]) -> ErrorGuidance:
    """
    Look up remediation guidance for a failure.

    Kinds without a dedicated entry get generic guidance carrying the
    error's own message.

    Args:
        error: The classified failure (None gives generic guidance)

    Returns:
        ErrorGuidance for display or narration
    """
    kind = error.kind if error is not None else ErrorKind.GENERIC
    guidance = _GUIDANCE.get(kind)
    if guidance is not None:
        return ErrorGuidance(
            title=guidance.title,
            message=guidance.message,
            instructions=list(guidance.instructions),
            can_retry=guidance.can_retry,
            show_browser_help=guidance.show_browser_help,
        )

    return ErrorGuidance(
        title="Camera Error",
        message=(error.message if error is not None else None)
        or "An unexpected camera error occurred.",
        instructions=[
            "Try again",
            "Check your camera permissions",
            "Contact support if the problem persists",
        ],
        can_retry=True,
        show_browser_help=True,
    )

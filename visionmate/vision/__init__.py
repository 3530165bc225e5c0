from visionmate.vision.acquisition import AcquiredStream, CameraAcquisition
from visionmate.vision.capability import (
    CaptureCapability,
    CaptureStream,
    CaptureTrack,
    OpenCVCaptureCapability,
    PermissionState,
)
from visionmate.vision.errors import (
    AcquisitionError,
    ErrorGuidance,
    ErrorKind,
    NativeError,
    classify,
    get_error_guidance,
)
from visionmate.vision.profiles import (
    DEFAULT,
    HIGH_QUALITY,
    LOW_BANDWIDTH,
    AcquisitionPreference,
    AcquisitionRequest,
    ConstraintProfile,
    build_profile_sequence,
)

__all__ = [
    "AcquiredStream",
    "AcquisitionError",
    "AcquisitionPreference",
    "AcquisitionRequest",
    "CameraAcquisition",
    "CaptureCapability",
    "CaptureStream",
    "CaptureTrack",
    "ConstraintProfile",
    "DEFAULT",
    "ErrorGuidance",
    "ErrorKind",
    "HIGH_QUALITY",
    "LOW_BANDWIDTH",
    "NativeError",
    "OpenCVCaptureCapability",
    "PermissionState",
    "build_profile_sequence",
    "classify",
    "get_error_guidance",
]

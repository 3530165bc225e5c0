"""
Host media-capture capability.

The acquisition component never touches a camera API directly; it is
handed a CaptureCapability. OpenCVCaptureCapability is the real one.

Privacy: Frames are processed in-memory only, never saved to disk.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from visionmate.core.config import CameraConfig
from visionmate.utils.logger import get_logger
from visionmate.vision.errors import NativeError
from visionmate.vision.profiles import ConstraintProfile

logger = get_logger(__name__)


class PermissionState(Enum):
    """Host camera permission as last reported."""

    GRANTED = "granted"
    DENIED = "denied"
    PROMPT = "prompt"
    UNKNOWN = "unknown"


class CaptureTrack(ABC):
    """One media track inside a capture stream."""

    @abstractmethod
    def stop(self) -> None:
        """Stop the track. Safe to call more than once."""

    @property
    @abstractmethod
    def live(self) -> bool:
        """True until the track is stopped."""


class CaptureStream(ABC):
    """A live capture session made of one or more tracks."""

    @property
    @abstractmethod
    def tracks(self) -> Sequence[CaptureTrack]:
        pass

    def stop(self) -> None:
        """Stop every track. Safe to call more than once."""
        for track in self.tracks:
            track.stop()

    @property
    def active(self) -> bool:
        return any(track.live for track in self.tracks)


class CaptureCapability(ABC):
    """
    Abstract host capture capability.

    All capture backends (real or fake) implement this contract.
    """

    @abstractmethod
    def capability_available(self) -> bool:
        """Return True if the host supports camera capture at all."""

    @abstractmethod
    async def open_capture(self, profile: ConstraintProfile) -> CaptureStream:
        """
        Open a capture session for a profile.

        May suspend until the operator answers a permission prompt.

        Raises:
            NativeError: On any host-level failure
        """

    def close_capture(self, stream: Optional[CaptureStream]) -> None:
        """Stop all tracks of a stream. Idempotent; None is a no-op."""
        if stream is not None:
            stream.stop()

    async def has_video_device(self) -> bool:
        """Return True if at least one video input is present."""
        return self.capability_available()

    async def permission_state(self) -> PermissionState:
        """Report camera permission without prompting."""
        return PermissionState.UNKNOWN


@dataclass
class CameraFrame:
    """Represents a captured camera frame with metadata."""

    image: np.ndarray  # RGB format (H, W, 3)
    timestamp: float
    frame_number: int


def list_available_cameras(max_test: int = 5) -> List[int]:
    """
    List available camera indices.

    Args:
        max_test: Maximum camera index to test

    Returns:
        List of available camera indices
    """
    available = []
    for i in range(max_test):
        cap = cv2.VideoCapture(i)
        if cap.isOpened():
            available.append(i)
        cap.release()

    logger.info(f"Found {len(available)} available cameras: {available}")
    return available


class OpenCVVideoTrack(CaptureTrack):
    """Video track backed by a cv2.VideoCapture."""

    def __init__(self, capture: cv2.VideoCapture):
        self._capture: Optional[cv2.VideoCapture] = capture

    def stop(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.debug("Video track stopped")

    @property
    def live(self) -> bool:
        return self._capture is not None

    @property
    def capture(self) -> Optional[cv2.VideoCapture]:
        return self._capture


class OpenCVCaptureStream(CaptureStream):
    """
    Capture stream over a single OpenCV video track.

    Privacy: Frames are never saved to disk.
    """

    def __init__(self, capture: cv2.VideoCapture, profile: ConstraintProfile):
        self._track = OpenCVVideoTrack(capture)
        self._profile = profile
        self._frame_count = 0

    @property
    def tracks(self) -> Sequence[CaptureTrack]:
        return (self._track,)

    @property
    def profile(self) -> ConstraintProfile:
        return self._profile

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def read_frame(self) -> Optional[CameraFrame]:
        """
        Read a frame from the camera.

        Returns:
            CameraFrame in RGB format, or None if the stream is stopped
            or the read failed
        """
        capture = self._track.capture
        if capture is None:
            logger.warning("Attempted to read from stopped stream")
            return None

        ret, frame = capture.read()
        if not ret or frame is None:
            logger.warning("Failed to read frame from camera")
            return None

        # Convert BGR (OpenCV default) to RGB
        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        self._frame_count += 1

        return CameraFrame(
            image=frame_rgb,
            timestamp=cv2.getTickCount() / cv2.getTickFrequency(),
            frame_number=self._frame_count,
        )

    def get_frame_size(self) -> Tuple[int, int]:
        """
        Get negotiated frame dimensions.

        Returns:
            (width, height), or the requested profile size once stopped
        """
        capture = self._track.capture
        if capture is None:
            return self._profile.resolution

        return _negotiated_size(capture)


class OpenCVCaptureCapability(CaptureCapability):
    """
    Capture capability over OpenCV's VideoCapture.

    Blocking device calls run in a worker thread so the event loop is
    never stalled while a device opens.
    """

    def __init__(self, config: CameraConfig):
        self._config = config
        logger.info(f"OpenCV capture capability for camera {config.camera_index}")

    def capability_available(self) -> bool:
        return hasattr(cv2, "VideoCapture")

    async def has_video_device(self) -> bool:
        if not self.capability_available():
            return False
        available = await asyncio.to_thread(
            list_available_cameras, self._config.camera_index + 1
        )
        return self._config.camera_index in available

    async def permission_state(self) -> PermissionState:
        # OpenCV exposes no permission query
        return PermissionState.UNKNOWN

    async def open_capture(self, profile: ConstraintProfile) -> CaptureStream:
        return await asyncio.to_thread(self._open_blocking, profile)

    def _open_blocking(self, profile: ConstraintProfile) -> OpenCVCaptureStream:
        index = self._config.camera_index
        logger.info(f"Opening camera {index} with profile {profile}")

        capture = cv2.VideoCapture(index)
        try:
            return self._negotiate(capture, profile)
        except BaseException:
            # Any failure after the device opened must free it
            capture.release()
            raise

    def _negotiate(
        self, capture: cv2.VideoCapture, profile: ConstraintProfile
    ) -> OpenCVCaptureStream:
        index = self._config.camera_index
        if not capture.isOpened():
            raise NativeError(
                "NotFoundError",
                f"Failed to open camera {index}. Check if camera is connected.",
            )

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, profile.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, profile.height)

        # Skip the first frames which may be black or corrupted
        for _ in range(self._config.warmup_frames):
            capture.read()

        ret, _ = capture.read()
        if not ret:
            raise NativeError(
                "NotReadableError",
                f"Camera {index} opened but produced no frames.",
            )

        actual_width, actual_height = _negotiated_size(capture)
        logger.info(f"Camera opened: {actual_width}x{actual_height} for {profile.name}")

        if self._config.strict_constraints and (
            actual_width < profile.width or actual_height < profile.height
        ):
            raise NativeError(
                "OverconstrainedError",
                f"Camera delivered {actual_width}x{actual_height}, "
                f"profile {profile.name} needs {profile.width}x{profile.height}.",
            )

        return OpenCVCaptureStream(capture, profile)


def _negotiated_size(capture: cv2.VideoCapture) -> Tuple[int, int]:
    width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))
    height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
    return (width, height)

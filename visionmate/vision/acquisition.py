"""
Camera acquisition with a constraint fallback ladder.

acquire() walks the profiles for a preference in order and returns the
first stream the host grants. Only constraint mismatches advance the
ladder; every other failure ends the attempt immediately.

Streams are owned by the caller. Every acquire must be paired with a
release on all exit paths; session() does the pairing for scoped use.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from visionmate.core.state import AcquisitionStateMachine
from visionmate.narration.narrator import Narrator, NullNarrator
from visionmate.utils.logger import get_logger
from visionmate.utils.timing import Timer
from visionmate.vision.capability import CaptureCapability, CaptureStream
from visionmate.vision.errors import (
    AcquisitionError,
    ErrorKind,
    classify,
    get_error_guidance,
)
from visionmate.vision.profiles import (
    AcquisitionPreference,
    AcquisitionRequest,
    ConstraintProfile,
)

logger = get_logger(__name__)


class AcquiredStream:
    """
    Handle to an active capture session.

    Exclusively owned by the caller of acquire(); released exactly once.
    """

    def __init__(
        self,
        stream: CaptureStream,
        profile: ConstraintProfile,
        acquisition: "CameraAcquisition",
    ):
        self._stream: Optional[CaptureStream] = stream
        self._profile = profile
        self._acquisition = acquisition

    @property
    def stream(self) -> Optional[CaptureStream]:
        """Underlying host stream, or None once released."""
        return self._stream

    @property
    def profile(self) -> ConstraintProfile:
        """Profile the host granted."""
        return self._profile

    @property
    def released(self) -> bool:
        return self._stream is None

    def release(self) -> None:
        self._acquisition.release(self)

    def _detach(self) -> Optional[CaptureStream]:
        stream, self._stream = self._stream, None
        return stream

    def __repr__(self) -> str:
        state = "released" if self.released else "active"
        return f"AcquiredStream(profile={self._profile.name!r}, {state})"


class CameraAcquisition:
    """
    Obtains camera streams from an injected capture capability.

    Single-caller, event-loop based: profiles are requested one after
    another, each awaited to completion before the next.
    """

    def __init__(
        self,
        capability: CaptureCapability,
        narrator: Optional[Narrator] = None,
    ):
        """
        Initialize acquisition.

        Args:
            capability: Host capture capability
            narrator: Voice narrator for outcomes (default: silent)
        """
        self._capability = capability
        self._narrator = narrator or NullNarrator()
        self._last_state: Optional[AcquisitionStateMachine] = None

    @property
    def last_attempt(self) -> Optional[AcquisitionStateMachine]:
        """State machine of the most recent acquire call."""
        return self._last_state

    @staticmethod
    def classify(native_error) -> ErrorKind:
        """Map a raw host failure to its ErrorKind."""
        return classify(native_error)

    async def acquire(
        self,
        preference: Optional[AcquisitionPreference] = None,
        *,
        request: Optional[AcquisitionRequest] = None,
    ) -> AcquiredStream:
        """
        Acquire a camera stream.

        Args:
            preference: Quality preference (default: no high quality,
                low quality allowed)
            request: Explicit profiles and retry budget; overrides
                preference when given

        Returns:
            AcquiredStream for the first profile the host granted

        Raises:
            AcquisitionError: Classified terminal failure
        """
        if request is None:
            request = AcquisitionRequest.from_preference(
                preference or AcquisitionPreference()
            )
        state = AcquisitionStateMachine()
        self._last_state = state

        try:
            with Timer("acquire") as timer:
                acquired = await self._run(request, state)
        except AcquisitionError as e:
            logger.error(f"Camera acquisition failed [{e.kind.name}]: {e.message}")
            self._narrator.announce(get_error_guidance(e).as_speech())
            raise

        logger.info(
            f"Camera acquired with profile {acquired.profile.name} "
            f"after {len(state.attempts)} attempt(s) ({timer})"
        )
        self._narrator.announce(f"Camera ready, {acquired.profile.name} quality.")
        return acquired

    async def _run(
        self, request: AcquisitionRequest, state: AcquisitionStateMachine
    ) -> AcquiredStream:
        if not self._capability.capability_available():
            error = AcquisitionError(ErrorKind.NOT_SUPPORTED)
            state.fail(error.kind)
            raise error

        retries_left = request.max_retries
        last_error: Optional[AcquisitionError] = None
        profiles = request.profiles

        for index, profile in enumerate(profiles):
            state.request(profile.name)
            logger.debug(f"Requesting camera with profile {profile}")

            try:
                stream = await self._capability.open_capture(profile)
            except Exception as e:
                error = AcquisitionError.from_native(e, profile=profile)
                last_error = error

                has_next = index + 1 < len(profiles)
                if error.kind.aborts_sequence or not has_next or retries_left <= 0:
                    state.fail(error.kind)
                    raise error

                logger.warning(
                    f"Profile {profile.name} not satisfiable, "
                    f"falling back to {profiles[index + 1].name}"
                )
                retries_left -= 1
                state.retry()
                continue

            state.succeed()
            return AcquiredStream(stream, profile, self)

        # Ladder exhausted
        error = last_error or AcquisitionError(ErrorKind.GENERIC)
        state.fail(error.kind)
        raise error

    def release(self, stream: Optional[AcquiredStream]) -> None:
        """
        Stop all tracks of an acquired stream.

        None and already-released streams are a no-op. Never raises.
        """
        if stream is None:
            return

        raw = stream._detach()
        if raw is None:
            return

        try:
            self._capability.close_capture(raw)
            logger.info(f"Camera released ({stream.profile.name})")
        except Exception as e:
            logger.error(f"Error while releasing camera: {e}")

    async def reacquire(
        self,
        previous: Optional[AcquiredStream],
        preference: Optional[AcquisitionPreference] = None,
    ) -> AcquiredStream:
        """
        Release a prior stream, then acquire a fresh one.

        Used for user-initiated retries; the old device handle is always
        freed before the new request goes out.
        """
        self.release(previous)
        return await self.acquire(preference)

    @asynccontextmanager
    async def session(
        self, preference: Optional[AcquisitionPreference] = None
    ) -> AsyncIterator[AcquiredStream]:
        """
        Scoped acquisition: the stream is released on every exit path.

        Usage:
            async with acquisition.session(preference) as acquired:
                ...
        """
        acquired = await self.acquire(preference)
        try:
            yield acquired
        finally:
            self.release(acquired)

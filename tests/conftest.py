"""
Shared fixtures: a scripted capture capability with call instrumentation.
"""

from typing import Dict, List, Optional, Sequence, Union

import pytest

from visionmate.narration.narrator import Narrator
from visionmate.vision.capability import CaptureCapability, CaptureStream, CaptureTrack
from visionmate.vision.errors import NativeError
from visionmate.vision.profiles import ConstraintProfile


class FakeTrack(CaptureTrack):
    """Track that counts stop() calls."""

    def __init__(self):
        self.stop_calls = 0

    def stop(self) -> None:
        self.stop_calls += 1

    @property
    def live(self) -> bool:
        return self.stop_calls == 0


class FakeStream(CaptureStream):
    """Stream tagged with the profile it was opened for."""

    def __init__(self, profile: ConstraintProfile, track_count: int = 1):
        self.profile = profile
        self._tracks = [FakeTrack() for _ in range(track_count)]

    @property
    def tracks(self) -> Sequence[CaptureTrack]:
        return self._tracks


Outcome = Union[None, BaseException]


class ScriptedCapability(CaptureCapability):
    """
    Capability whose open_capture outcome is scripted per profile name.

    A profile mapped to an exception raises it; anything else succeeds.
    """

    def __init__(
        self,
        outcomes: Optional[Dict[str, Outcome]] = None,
        available: bool = True,
    ):
        self.outcomes = outcomes or {}
        self.available = available
        self.open_calls: List[str] = []
        self.close_calls = 0
        self.opened: List[FakeStream] = []

    def capability_available(self) -> bool:
        return self.available

    async def open_capture(self, profile: ConstraintProfile) -> CaptureStream:
        self.open_calls.append(profile.name)
        outcome = self.outcomes.get(profile.name)
        if isinstance(outcome, BaseException):
            raise outcome
        stream = FakeStream(profile)
        self.opened.append(stream)
        return stream

    def close_capture(self, stream) -> None:
        self.close_calls += 1
        super().close_capture(stream)

    @property
    def call_count(self) -> int:
        return len(self.open_calls)


class RecordingNarrator(Narrator):
    """Narrator that keeps every message."""

    def __init__(self):
        self.messages: List[str] = []

    def announce(self, message: str) -> None:
        self.messages.append(message)


def native(name: str, message: str = "") -> NativeError:
    return NativeError(name, message)


@pytest.fixture
def capability():
    """Capability where every profile succeeds."""
    return ScriptedCapability()


@pytest.fixture
def narrator():
    return RecordingNarrator()

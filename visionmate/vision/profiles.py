"""
Camera constraint profiles and the fallback ladder built from them.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ConstraintProfile:
    """
    A named capture quality tier.

    Width and height are the ideal resolution; the host may negotiate
    something close to it.
    """

    name: str
    width: int
    height: int
    facing_mode: str = "environment"  # Rear camera on phones

    @property
    def resolution(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def __str__(self) -> str:
        return f"{self.name} ({self.width}x{self.height}, {self.facing_mode})"


HIGH_QUALITY = ConstraintProfile(name="high", width=1920, height=1080)
DEFAULT = ConstraintProfile(name="default", width=1280, height=720)
LOW_BANDWIDTH = ConstraintProfile(name="low", width=640, height=480)

# Preference order, best first
ALL_PROFILES: Tuple[ConstraintProfile, ...] = (HIGH_QUALITY, DEFAULT, LOW_BANDWIDTH)


@dataclass(frozen=True)
class AcquisitionPreference:
    """Caller's quality preference for one acquire call."""

    prefer_high_quality: bool = False
    allow_low_quality: bool = True


@dataclass(frozen=True)
class AcquisitionRequest:
    """
    Ordered profiles to attempt plus a retry budget.

    Each constraint mismatch spends one retry to advance one step, so
    no profile is requested more than once.
    """

    profiles: Tuple[ConstraintProfile, ...]
    max_retries: int

    def __post_init__(self):
        if not self.profiles:
            raise ValueError("AcquisitionRequest needs at least one profile")

        names = [profile.name for profile in self.profiles]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate profiles in request: {names}")

        if not 0 <= self.max_retries < len(self.profiles):
            raise ValueError(
                f"max_retries must be between 0 and {len(self.profiles) - 1}"
            )

    @classmethod
    def from_preference(cls, preference: AcquisitionPreference) -> "AcquisitionRequest":
        profiles = build_profile_sequence(preference)
        return cls(profiles=profiles, max_retries=len(profiles) - 1)


def build_profile_sequence(
    preference: AcquisitionPreference,
) -> Tuple[ConstraintProfile, ...]:
    """
    Build the fallback ladder for a preference.

    Args:
        preference: Quality preference

    Returns:
        (HIGH_QUALITY, DEFAULT, LOW_BANDWIDTH) when high quality is preferred,
        (DEFAULT, LOW_BANDWIDTH) otherwise; LOW_BANDWIDTH is dropped when
        low quality is not allowed.
    """
    if preference.prefer_high_quality:
        sequence = [HIGH_QUALITY, DEFAULT, LOW_BANDWIDTH]
    else:
        sequence = [DEFAULT, LOW_BANDWIDTH]

    if not preference.allow_low_quality:
        sequence.remove(LOW_BANDWIDTH)

    return tuple(sequence)

"""
Tests for constraint profiles and fallback ladder construction.
"""

import itertools

import pytest

from visionmate.vision.profiles import (
    ALL_PROFILES,
    DEFAULT,
    HIGH_QUALITY,
    LOW_BANDWIDTH,
    AcquisitionPreference,
    AcquisitionRequest,
    ConstraintProfile,
    build_profile_sequence,
)


class TestConstraintProfile:
    """Tests for ConstraintProfile."""

    def test_profiles_ordered_by_quality(self):
        """Test that the static tiers descend in resolution."""
        widths = [profile.width for profile in ALL_PROFILES]
        assert widths == sorted(widths, reverse=True)

    def test_profile_is_immutable(self):
        """Test that profiles cannot be modified."""
        with pytest.raises(AttributeError):
            DEFAULT.width = 320

    def test_rear_camera_by_default(self):
        """Test that all tiers request the environment-facing camera."""
        assert all(p.facing_mode == "environment" for p in ALL_PROFILES)

    def test_resolution(self):
        assert HIGH_QUALITY.resolution == (1920, 1080)
        assert DEFAULT.resolution == (1280, 720)
        assert LOW_BANDWIDTH.resolution == (640, 480)


class TestBuildProfileSequence:
    """Tests for build_profile_sequence."""

    @pytest.mark.parametrize(
        "prefer_high, allow_low, expected",
        [
            (True, True, (HIGH_QUALITY, DEFAULT, LOW_BANDWIDTH)),
            (True, False, (HIGH_QUALITY, DEFAULT)),
            (False, True, (DEFAULT, LOW_BANDWIDTH)),
            (False, False, (DEFAULT,)),
        ],
    )
    def test_sequence_for_preference(self, prefer_high, allow_low, expected):
        """Test the ladder built for each preference combination."""
        preference = AcquisitionPreference(
            prefer_high_quality=prefer_high, allow_low_quality=allow_low
        )
        assert build_profile_sequence(preference) == expected

    def test_no_duplicates_and_ordering_respected(self):
        """Test every sequence is duplicate-free and in preference order."""
        for prefer_high, allow_low in itertools.product([True, False], repeat=2):
            sequence = build_profile_sequence(
                AcquisitionPreference(prefer_high, allow_low)
            )
            assert len(set(sequence)) == len(sequence)

            positions = [ALL_PROFILES.index(p) for p in sequence]
            assert positions == sorted(positions)

    def test_default_preference(self):
        """Test that the default preference skips high quality."""
        assert build_profile_sequence(AcquisitionPreference()) == (
            DEFAULT,
            LOW_BANDWIDTH,
        )


class TestAcquisitionRequest:
    """Tests for AcquisitionRequest."""

    def test_from_preference_budget(self):
        """Test the retry budget allows one step per remaining profile."""
        request = AcquisitionRequest.from_preference(
            AcquisitionPreference(prefer_high_quality=True)
        )
        assert request.profiles == (HIGH_QUALITY, DEFAULT, LOW_BANDWIDTH)
        assert request.max_retries == 2

    def test_empty_profiles_rejected(self):
        with pytest.raises(ValueError, match="at least one profile"):
            AcquisitionRequest(profiles=(), max_retries=0)

    def test_duplicate_profiles_rejected(self):
        with pytest.raises(ValueError, match="Duplicate profiles"):
            AcquisitionRequest(profiles=(DEFAULT, DEFAULT), max_retries=1)

    def test_budget_cannot_repeat_profiles(self):
        """Test a budget that would request some profile twice is rejected."""
        with pytest.raises(ValueError, match="max_retries"):
            AcquisitionRequest(profiles=(DEFAULT, LOW_BANDWIDTH), max_retries=2)

    def test_custom_profile(self):
        custom = ConstraintProfile(name="front", width=640, height=480, facing_mode="user")
        request = AcquisitionRequest(profiles=(custom,), max_retries=0)
        assert request.profiles[0].facing_mode == "user"

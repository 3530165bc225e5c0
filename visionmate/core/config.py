"""
Configuration management for VisionMate.

All application configuration with sensible defaults.
Uses dataclasses for type safety and validation.
"""

from dataclasses import dataclass, field
import os
from pathlib import Path


@dataclass
class CameraConfig:
    """Host camera configuration."""

    camera_index: int = 0  # Default camera
    warmup_frames: int = 5  # Frames to skip after the device opens

    # Reject a profile when the negotiated resolution is below the request
    strict_constraints: bool = False

    # Frames read by the entry point to check the stream is live
    sample_frames: int = 30


@dataclass
class AcquisitionConfig:
    """Fallback ladder preferences."""

    prefer_high_quality: bool = False
    allow_low_quality: bool = True


@dataclass
class NarrationConfig:
    """Voice narration settings."""

    enabled: bool = True
    rate: float = 0.9  # Relative to the engine's default speaking rate
    volume: float = 0.8  # Range: 0.0-1.0


@dataclass
class StorageConfig:
    """Local file locations (log output only)."""

    data_dir: Path = field(default_factory=lambda: Path.home() / ".visionmate")

    log_filename: str = "visionmate.log"

    # File logging is off unless asked for
    enable_file_logging: bool = False

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)

    @property
    def log_path(self) -> Path:
        """Get full path to log file."""
        return self.data_dir / self.log_filename

    def ensure_data_dir(self) -> Path:
        """
        Create the data directory if needed.

        Returns:
            Resolved data directory

        Raises:
            ValueError: If the directory cannot be created or resolved
        """
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            return self.data_dir.resolve(strict=True)
        except (RuntimeError, OSError) as e:
            raise ValueError(f"Invalid data directory path: {e}")


@dataclass
class AppConfig:
    """Main application configuration."""

    camera: CameraConfig = field(default_factory=CameraConfig)
    acquisition: AcquisitionConfig = field(default_factory=AcquisitionConfig)
    narration: NarrationConfig = field(default_factory=NarrationConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    version: str = "0.1.0"

    # Log level from environment or default to WARNING
    log_level: str = field(
        default_factory=lambda: os.getenv("VISIONMATE_LOG_LEVEL", "WARNING")
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration parameters."""
        if self.camera.camera_index < 0:
            raise ValueError("camera_index must be non-negative")

        if self.camera.warmup_frames < 0:
            raise ValueError("warmup_frames must be non-negative")

        if self.camera.sample_frames < 1:
            raise ValueError("sample_frames must be at least 1")

        if not 0.1 <= self.narration.rate <= 3.0:
            raise ValueError("narration rate must be between 0.1 and 3.0")

        if not 0.0 <= self.narration.volume <= 1.0:
            raise ValueError("narration volume must be between 0.0 and 1.0")


def get_default_config() -> AppConfig:
    """
    Get default application configuration.

    Returns:
        AppConfig instance with default values
    """
    return AppConfig()

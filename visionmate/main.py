"""
VisionMate - camera acquisition check

Main entry point. Acquires the camera through the fallback ladder,
reads a few frames to confirm the stream is live, then releases it.

Privacy:
- All processing local
- No video recording
- Frames are discarded after reading

Usage:
    python -m visionmate.main
"""

import asyncio
import sys

from visionmate.core.config import AppConfig, get_default_config
from visionmate.narration.narrator import create_narrator
from visionmate.utils.logger import setup_logger, get_logger
from visionmate.utils.timing import FPSCounter
from visionmate.vision.acquisition import CameraAcquisition
from visionmate.vision.capability import OpenCVCaptureCapability, OpenCVCaptureStream
from visionmate.vision.errors import AcquisitionError, get_error_guidance
from visionmate.vision.profiles import AcquisitionPreference


async def run(config: AppConfig, acquisition: CameraAcquisition) -> int:
    """
    Acquire, sample frames from and release the camera once.

    Returns:
        Process exit code (0 on success, 1 on acquisition failure)
    """
    logger = get_logger(__name__)
    preference = AcquisitionPreference(
        prefer_high_quality=config.acquisition.prefer_high_quality,
        allow_low_quality=config.acquisition.allow_low_quality,
    )

    try:
        async with acquisition.session(preference) as acquired:
            stream = acquired.stream
            if isinstance(stream, OpenCVCaptureStream):
                fps_counter = FPSCounter()
                for _ in range(config.camera.sample_frames):
                    frame = await asyncio.to_thread(stream.read_frame)
                    if frame is None:
                        break
                    fps_counter.tick()

                width, height = stream.get_frame_size()
                logger.info(
                    f"Sample: {stream.frame_count} frames at {width}x{height}, "
                    f"{fps_counter.fps:.1f}fps"
                )
    except AcquisitionError as e:
        guidance = get_error_guidance(e)
        logger.error(f"{guidance.title}: {guidance.message}")
        for step, instruction in enumerate(guidance.instructions, 1):
            logger.error(f"  {step}. {instruction}")
        return 1

    return 0


def main():
    """Main entry point."""

    config = get_default_config()

    log_file = None
    if config.storage.enable_file_logging:
        config.storage.ensure_data_dir()
        log_file = config.storage.log_path

    setup_logger(
        name="visionmate",
        level=config.log_level,
        log_file=log_file,
        enable_file_logging=config.storage.enable_file_logging,
    )

    logger = get_logger(__name__)
    logger.info("=" * 60)
    logger.info("VisionMate Starting")
    logger.info(f"Version: {config.version}")
    logger.info("=" * 60)

    narrator = create_narrator(config.narration)
    acquisition = CameraAcquisition(
        OpenCVCaptureCapability(config.camera),
        narrator=narrator,
    )

    try:
        exit_code = asyncio.run(run(config, acquisition))
    finally:
        narrator.close()

    logger.info("Application exiting")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())

"""
VisionMate - camera acquisition for an assistive vision front-end.

Obtains a live camera stream through an ordered ladder of quality
profiles and reports failures as a closed set of error kinds with
spoken remediation guidance.

Privacy First:
- All processing happens locally
- No video recording
- File logging off by default

Architecture:
- Host capture injected as a capability (no global camera state)
- Acquire and release paired by the caller, or scoped with session()
"""

__version__ = "0.1.0"
__author__ = "VisionMate Team"
__license__ = "MIT"

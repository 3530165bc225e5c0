from visionmate.narration.narrator import (
    Narrator,
    NullNarrator,
    Pyttsx3Narrator,
    create_narrator,
)

__all__ = ["Narrator", "NullNarrator", "Pyttsx3Narrator", "create_narrator"]

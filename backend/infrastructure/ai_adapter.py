"""
AI collaborator adapter: turns a video into transcript, script, captions,
cuts, voiceover and zoom keyframes.

The pipeline only depends on the AICollaborator protocol. MockAICollaborator
returns deterministic placeholder results so the whole flow can run locally
without any model installed.
"""
import time
from typing import List, Protocol

from backend.domain.errors import CollaboratorError
from backend.domain.models import Artifacts, Asset


class AICollaborator(Protocol):
    def process(self, asset: Asset) -> Artifacts:
        """Return the artifacts for ``asset`` or raise CollaboratorError."""
        ...


def _caption_cues(sentences: List[str], seconds_per_cue: float = 3.0) -> List[dict]:
    cues = []
    for i, text in enumerate(sentences):
        start = round(i * seconds_per_cue, 2)
        cues.append({"start": start, "end": round(start + seconds_per_cue, 2), "text": text})
    return cues


class MockAICollaborator:
    """Placeholder AI service. ``delay`` simulates model latency in seconds."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay

    def process(self, asset: Asset) -> Artifacts:
        if not asset.source_path:
            raise CollaboratorError(f"Video {asset.id} has no source file")
        if self.delay:
            time.sleep(self.delay)

        title = asset.title or "Untitled video"
        sentences = [
            f"Welcome to {title}.",
            "In this video we walk through the main points step by step.",
            "Thanks for watching, see you in the next one.",
        ]
        return Artifacts(
            transcript=" ".join(sentences),
            ai_script=f"# {title}\n\nIntro\n- Hook the viewer\n\nBody\n- Key points\n\nOutro\n- Call to action\n",
            captions=_caption_cues(sentences),
            cuts=[
                {"start": 0.0, "end": 1.2, "reason": "Silence at start"},
                {"start": 4.5, "end": 5.1, "reason": "Filler word"},
            ],
            voiceover=f"voiceovers/{asset.id}.mp3",
            zoom_points=[
                {"timestamp": 2.0, "scale": 1.2, "duration": 1.5},
                {"timestamp": 6.0, "scale": 1.4, "duration": 2.0},
            ],
        )

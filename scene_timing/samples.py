"""Built-in sample storyboards for manual inspection of the timing rules.

Each sample targets one behavior: a real documentary opening, a run of
short beats that merges, one over-long beat for the split rule, the
punctuation pauses, and a mix of measured and estimated segments.
"""

from __future__ import annotations

from typing import Dict, List

from .models import SegmentInput

DOCUMENTARY_SCRIPT = [
    "For those of us who grew up in the late '80s and '90s, Nickelodeon wasn't just a TV channel. It was ours.",
    "It felt like a secret clubhouse where kids were in charge, where the world was messy, colorful, and chaotic in the best possible way.",
    "From the iconic orange splat logo to unforgettable shows like Rugrats, Hey Arnold!, and SpongeBob SquarePants, Nickelodeon defined childhood for an entire generation.",
    "But behind the slime and silly cartoons was something deeper: a channel that trusted kids' intelligence, took risks on weird and wonderful ideas, and dominated the ratings for years.",
    "Then something changed. The network that once felt revolutionary started to fade.",
    "So what happened? How did Nickelodeon rise to become the gold standard of children's television, and why did it lose its magic?",
    "This is the story of Nickelodeon: its creative triumphs, its surprising decline, and the legacy it left behind.",
    "Nickelodeon didn't start as the cultural phenomenon it would become. It launched in 1979 as a small, experimental cable channel with a modest goal: to create commercial-free programming for kids.",
    "Early shows like Pinwheel were gentle, educational, and largely forgettable. The network struggled to find an identity and nearly went under multiple times.",
    "Everything changed in 1984 when Geraldine Laybourne took over as president. Laybourne had a radical idea: stop talking down to kids.",
]


def _scenes(texts: List[str]) -> List[SegmentInput]:
    return [SegmentInput(id="scene-{}".format(i), text=t) for i, t in enumerate(texts, 1)]


SAMPLES: Dict[str, List[SegmentInput]] = {
    "documentary": _scenes(DOCUMENTARY_SCRIPT),
    "short": [
        SegmentInput(id="scene-1", text="Short.", kind="title"),
        SegmentInput(id="scene-2", text="Very short!", kind="title"),
        SegmentInput(id="scene-3", text="Tiny.", kind="transition"),
        SegmentInput(id="scene-4", text="This is a longer scene that will not be merged."),
    ],
    "long": _scenes([
        "This is an extremely long scene that contains many many words and should "
        "definitely be auto-split at a natural breakpoint like a period or other "
        "sentence-ending punctuation. This is the second sentence. And here is a "
        "third sentence to make it even longer.",
    ]),
    "punctuation": _scenes([
        "Simple sentence.",
        "Dramatic sentence!",
        "A question?",
        "Wait for it... the reveal!",
        "One, two, three, four items.",
    ]),
    "audio": [
        SegmentInput(id="scene-1", text="This scene has audio timing.", measured_start=0.0, measured_end=3.5),
        SegmentInput(id="scene-2", text="This scene is estimated."),
        SegmentInput(id="scene-3", text="This scene also has audio.", measured_start=8.0, measured_end=12.25),
    ],
}

import random
from typing import Tuple

from .models import Verdict

DEMO_AUTHENTIC_NAME = "scan.jpg"
DEMO_TAMPERED_PREFIX = "scan_tempered."

TAMPER_TOKENS = ("tampered", "tempered", "fake", "edited", "manipulated", "forged")

BASE_CONFIDENCE = {Verdict.AUTHENTIC: 96.0, Verdict.TAMPERED: 88.0}
CONFIDENCE_SPREAD = 4.0


def classify(file_name: str, rng=None) -> Tuple[Verdict, float]:
    """
    Assign a verdict and a confidence score to an uploaded file name.

    The two demo names short-circuit to fixed results. Everything else goes
    through token matching, with confidence drawn from `rng.random()` on top
    of a per-verdict base. Pass a seeded `random.Random` for repeatable runs.
    """
    name = (file_name or "").lower()
    if name == DEMO_AUTHENTIC_NAME:
        return Verdict.AUTHENTIC, 99.3
    if name.startswith(DEMO_TAMPERED_PREFIX):
        return Verdict.TAMPERED, 91.7

    verdict = Verdict.TAMPERED if any(t in name for t in TAMPER_TOKENS) else Verdict.AUTHENTIC
    source = rng if rng is not None else random
    base = BASE_CONFIDENCE[verdict]
    confidence = round(base + source.random() * CONFIDENCE_SPREAD, 1)
    # rounding may land on base + 4.0
    return verdict, min(confidence, round(base + CONFIDENCE_SPREAD - 0.1, 1))

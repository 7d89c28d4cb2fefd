from __future__ import annotations

import logging
import random
from typing import Callable

from .runtime_constants import CHALLENGE_PHRASES, CHALLENGE_WORDS
from .runtime_types import Challenge

logger = logging.getLogger(__name__)

ChallengeSource = Callable[[], Challenge]
ChallengeGenerator = Callable[[random.Random], Challenge]


class ChallengeGenerationError(RuntimeError):
    pass


def _pick(rng: random.Random, items: tuple[str, ...]) -> str:
    return items[rng.randrange(len(items))]


def generate_exact(rng: random.Random) -> Challenge:
    options = [
        _pick(rng, CHALLENGE_WORDS),
        f"{_pick(rng, CHALLENGE_WORDS)} {_pick(rng, CHALLENGE_WORDS)}",
        f"{_pick(rng, CHALLENGE_WORDS)} {rng.randrange(99)}",
        *CHALLENGE_PHRASES,
    ]
    base = options[rng.randrange(len(options))]
    return Challenge(prompt=f"Tape exactement : « {base} »", expect=base)


def generate_upper(rng: random.Random) -> Challenge:
    base = f"{_pick(rng, CHALLENGE_WORDS)} {_pick(rng, CHALLENGE_WORDS)}".lower()
    return Challenge(prompt=f"MAJUSCULES : « {base} »", expect=base.upper())


def generate_reverse(rng: random.Random) -> Challenge:
    base = f"{_pick(rng, CHALLENGE_WORDS)} {_pick(rng, CHALLENGE_WORDS)}"
    return Challenge(prompt=f"À l’envers : « {base} »", expect=base[::-1])


DEFAULT_GENERATORS: tuple[ChallengeGenerator, ...] = (
    generate_exact,
    generate_upper,
    generate_reverse,
)


def make_challenge_source(
    generators: tuple[ChallengeGenerator, ...] = DEFAULT_GENERATORS,
    rng: random.Random | None = None,
) -> ChallengeSource:
    if not generators:
        raise ChallengeGenerationError("At least one challenge generator is required")
    source_rng = rng or random.Random()

    def new_challenge() -> Challenge:
        generator = generators[source_rng.randrange(len(generators))]
        challenge = generator(source_rng)
        logger.debug("challenge generated kind=%s", generator.__name__)
        return challenge

    return new_challenge


new_challenge: ChallengeSource = make_challenge_source()

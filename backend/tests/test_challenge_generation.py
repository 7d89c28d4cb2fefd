import random

import pytest

from app.challenge_generation import (
    ChallengeGenerationError,
    generate_exact,
    generate_reverse,
    generate_upper,
    make_challenge_source,
    new_challenge,
)
from app.runtime_constants import CHALLENGE_PHRASES, CHALLENGE_WORDS


def _quoted(prompt):
    return prompt.split("« ", 1)[1].rsplit(" »", 1)[0]


def test_exact_challenge_expects_the_quoted_text():
    rng = random.Random(1)
    for _ in range(50):
        challenge = generate_exact(rng)
        assert challenge.prompt.startswith("Tape exactement")
        assert challenge.expect == _quoted(challenge.prompt)


def test_upper_challenge_expects_uppercase():
    rng = random.Random(2)
    for _ in range(50):
        challenge = generate_upper(rng)
        base = _quoted(challenge.prompt)
        assert base == base.lower()
        assert challenge.expect == base.upper()


def test_reverse_challenge_expects_reversed_text():
    rng = random.Random(3)
    for _ in range(50):
        challenge = generate_reverse(rng)
        base = _quoted(challenge.prompt)
        assert challenge.expect == base[::-1]
        first, second = base.split(" ")
        assert first in CHALLENGE_WORDS and second in CHALLENGE_WORDS


def test_exact_challenge_covers_fixed_phrases():
    rng = random.Random(4)
    expects = {generate_exact(rng).expect for _ in range(400)}
    assert expects & set(CHALLENGE_PHRASES)


def test_seeded_source_is_reproducible():
    first = make_challenge_source(rng=random.Random(42))
    second = make_challenge_source(rng=random.Random(42))
    assert [first() for _ in range(10)] == [second() for _ in range(10)]


def test_source_uses_all_generator_kinds():
    source = make_challenge_source(rng=random.Random(5))
    prefixes = {source().prompt.split(" :", 1)[0] for _ in range(200)}
    assert prefixes == {"Tape exactement", "MAJUSCULES", "À l’envers"}


def test_custom_generator_list():
    source = make_challenge_source(generators=(generate_upper,), rng=random.Random(6))
    assert all(source().prompt.startswith("MAJUSCULES") for _ in range(10))


def test_empty_generator_list_is_rejected():
    with pytest.raises(ChallengeGenerationError):
        make_challenge_source(generators=())


def test_default_source_produces_prompt_and_answer():
    challenge = new_challenge()
    assert challenge.prompt
    assert challenge.expect

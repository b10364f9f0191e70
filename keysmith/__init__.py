"""keysmith -- secure password generation.

Core routine for generating random passwords that contain every required
character class and never place two characters with neighbouring code points
next to each other.
"""

import logging
import operator
import random
import secrets

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    "UPPERCASE",
    "LOWERCASE",
    "DIGITS",
    "SPECIAL",
    "MIN_LENGTH",
    "MAX_LENGTH",
    "DEFAULT_LENGTH",
    "PasswordGenerationError",
    "InvalidLengthError",
    "EntropySourceError",
    "build_alphabet",
    "required_count",
    "is_sequential",
    "generate_password",
]


# ── Character classes ──────────────────────────────────────────────────────

UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
DIGITS = "0123456789"
SPECIAL = "!@#$%^&*()_-+=<>?"

# Bounds offered to users by front ends; the core only enforces the
# mandatory-class minimum.
MIN_LENGTH = 8
MAX_LENGTH = 64
DEFAULT_LENGTH = MIN_LENGTH


# ── Errors ─────────────────────────────────────────────────────────────────


class PasswordGenerationError(Exception):
    """Base class for every error raised by :func:`generate_password`."""


class InvalidLengthError(PasswordGenerationError, ValueError):
    """The requested length cannot hold one character of each required class."""


class EntropySourceError(PasswordGenerationError):
    """The cryptographic random source could not be read."""


# ── Helpers ────────────────────────────────────────────────────────────────


def build_alphabet(include_special: bool) -> str:
    """Return the combined alphabet used once the required characters are placed."""
    alphabet = UPPERCASE + LOWERCASE + DIGITS
    if include_special:
        alphabet += SPECIAL
    return alphabet


def required_count(include_special: bool) -> int:
    """Number of character classes every password must contain."""
    return 4 if include_special else 3


def is_sequential(prev: str, current: str) -> bool:
    """Return True if *current* is the code-point neighbour of *prev*.

    ``"a"`` then ``"b"`` and ``"B"`` then ``"A"`` are sequential; repeats
    such as ``"aa"`` are not.
    """
    return abs(ord(prev) - ord(current)) == 1


def _check_length(length: int, include_special: bool, allow_overflow: bool) -> int:
    """Return *length* as a plain ``int`` once it is known to be usable."""
    if isinstance(length, bool):
        raise InvalidLengthError(f"Password length must be an integer, got {length!r}")
    try:
        length = operator.index(length)
    except TypeError:
        raise InvalidLengthError(
            f"Password length must be an integer, got {length!r}"
        ) from None

    needed = required_count(include_special)
    if length >= needed:
        return length
    if not allow_overflow:
        raise InvalidLengthError(f"Password length must be at least {needed}")
    logger.warning(
        "Requested length %d is below the %d required characters; "
        "returning %d characters",
        length, needed, needed,
    )
    return length


def _required_characters(
    rng: random.Random, include_special: bool, interleave: bool,
) -> list[str]:
    """Pick one character from each required class.

    The characters come out in the fixed order upper, lower, digit, special
    unless *interleave* is set, in which case their order is shuffled.
    """
    classes = [UPPERCASE, LOWERCASE, DIGITS]
    if include_special:
        classes.append(SPECIAL)

    chars = [rng.choice(charset) for charset in classes]
    if interleave:
        rng.shuffle(chars)
    return chars


# ── Password generation ────────────────────────────────────────────────────


def generate_password(
    length: int = DEFAULT_LENGTH,
    include_special: bool = False,
    *,
    allow_overflow: bool = False,
    interleave: bool = False,
    rng: random.Random | None = None,
) -> str:
    """Generate a cryptographically secure random password.

    The first characters are one uppercase letter, one lowercase letter, one
    digit and, when *include_special* is set, one special character.  The
    remaining positions are drawn from the combined alphabet, resampling any
    draw whose code point is adjacent to the previous character.

    Raises :class:`InvalidLengthError` when *length* is smaller than the
    number of required classes, unless *allow_overflow* is set; then the
    full set of required characters is returned even though it is longer
    than *length*.  Raises :class:`EntropySourceError` when the random
    source fails.

    *rng* may be any object providing ``choice`` and ``shuffle`` (for example
    :class:`random.Random` in tests).  By default a fresh
    :class:`secrets.SystemRandom` is used for every call.
    """
    length = _check_length(length, include_special, allow_overflow)
    alphabet = build_alphabet(include_special)

    try:
        if rng is None:
            rng = secrets.SystemRandom()

        chars = _required_characters(rng, include_special, interleave)

        rejected = 0
        while len(chars) < length:
            candidate = rng.choice(alphabet)
            if is_sequential(chars[-1], candidate):
                rejected += 1
                continue
            chars.append(candidate)
    except (OSError, NotImplementedError) as exc:
        raise EntropySourceError(f"Random source unavailable: {exc}") from exc

    logger.debug(
        "Generated password: length=%d required=%d rejected_draws=%d",
        len(chars), required_count(include_special), rejected,
    )
    return "".join(chars)

"""
Expression Value Generator — Random values for generated parameters.

Patterns mix literal text with bracketed character classes followed by
a repeat count, e.g. "admin[A-Z0-9]{4}" or "[\\w]{16}". Inside a class:
    a-z      character range
    \\w      letters, digits and underscore
    \\d      digits
    \\a      letters
    \\A      punctuation symbols
"""

import random
import re
import string

from pipetemplate.errors import ConfigurationError


MAX_REPEAT = 255

_EXPRESSION = re.compile(r"\[((?:\\[wdaA]|[^\]])+)\]\{(\d+)\}")
_RANGE = re.compile(r"(.)-(.)")

_CLASS_ESCAPES = {
    "\\w": string.ascii_letters + string.digits + "_",
    "\\d": string.digits,
    "\\a": string.ascii_letters,
    "\\A": string.punctuation,
}


class ExpressionValueGenerator:
    """Generates values matching a bracket-class expression."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.SystemRandom()

    def generate(self, expression: str) -> str:
        """Expand every [class]{n} group in `expression`."""

        def _expand(match: re.Match) -> str:
            alphabet = self._alphabet(match.group(1))
            count = int(match.group(2))
            if count > MAX_REPEAT:
                raise ConfigurationError(
                    f"range {count} in expression {expression!r} exceeds maximum {MAX_REPEAT}"
                )
            return "".join(self._rng.choice(alphabet) for _ in range(count))

        return _EXPRESSION.sub(_expand, expression)

    def _alphabet(self, char_class: str) -> str:
        chars: list[str] = []
        for escape, members in _CLASS_ESCAPES.items():
            if escape in char_class:
                chars.append(members)
                char_class = char_class.replace(escape, "")

        for low, high in _RANGE.findall(char_class):
            if ord(low) > ord(high):
                raise ConfigurationError(f"invalid range {low}-{high} in expression")
            chars.append("".join(chr(c) for c in range(ord(low), ord(high) + 1)))
        char_class = _RANGE.sub("", char_class)
        chars.append(char_class)

        alphabet = "".join(dict.fromkeys("".join(chars)))
        if not alphabet:
            raise ConfigurationError("empty character class in expression")
        return alphabet

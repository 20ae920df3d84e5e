"""Value comparison helpers shared by projectors and comparators."""

from typing import Any


class _Sentinel:
    """Named marker object; equal only to itself."""

    def __init__(self, name: str):
        self._name = name

    def __repr__(self) -> str:
        return self._name


# Display text identical to the raw value is dropped from projections.
OMIT = _Sentinel("OMIT")

# Value of an entry that has none (error-shaped fields and cells).
MISSING = _Sentinel("MISSING")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strictly_equal(a: Any, b: Any) -> bool:
    """Compare two host values without type coercion.

    ``"100"`` and ``100`` differ, ``True`` and ``1`` differ. Ints and floats
    are a single number type on the host, so ``1`` equals ``1.0``. Lists and
    dicts (multi-select values) are compared element by element under the
    same rules.
    """
    if a is b:
        return True
    if isinstance(a, _Sentinel) or isinstance(b, _Sentinel):
        return False
    if _is_number(a) and _is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(strictly_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(strictly_equal(a[key], b[key]) for key in a)
    return a == b


def meta_text(value: Any) -> str:
    """Host metadata label or type as a string; None becomes empty."""
    if value is None:
        return ""
    return str(value)


def compact_text(value: Any, text: Any) -> Any:
    """Return ``text``, or ``OMIT`` when it only repeats ``value``."""
    if strictly_equal(value, text):
        return OMIT
    return text

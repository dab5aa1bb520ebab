"""
String helpers used to derive and clean site fields.
"""
import re

_NON_WORD = re.compile(r"[\W_]", re.UNICODE)
_WHITESPACE = re.compile(r"\s+")
_WORD_SEPARATORS = re.compile(r"[\s_-]+")


def squeeze(value: str, char: str) -> str:
    """Collapse every run of ``char`` into a single ``char``."""
    return re.sub(f"{re.escape(char)}{{2,}}", char, value)


def slugify(value: str | None) -> str | None:
    """
    Lowercase, turn every non-alphanumeric character into a separator,
    collapse separator runs and join words with ``-``.

    ``"My-Site.com"`` becomes ``"my-site-com"``. ``None`` passes through.
    """
    if value is None:
        return None
    words = _NON_WORD.sub(" ", value.lower()).strip()
    return _WHITESPACE.sub("-", words)


def titleize(value: str | None) -> str | None:
    """
    Capitalize every word, treating ``_``, ``-`` and whitespace as word
    separators. ``"my-site_com"`` becomes ``"My Site Com"``.
    """
    if value is None:
        return None
    words = [w for w in _WORD_SEPARATORS.split(value.strip()) if w]
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def clean_path(path: str | None) -> str:
    """
    Normalize a site path: ``None`` becomes ``""``, runs of ``/`` collapse
    to one and a single trailing ``/`` is removed. Idempotent.
    """
    path = squeeze(path or "", "/")
    if path.endswith("/"):
        path = path[:-1]
    return path


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()

"""
Identifier normalization for slinks.

The normalized key is the primary identity for both link records and click
stats, so every backend must derive it the same way.

Rules:
    - hyphens are dropped and the name is lower-cased ("Go-Link" == "golink")
    - anything a URL path segment cannot carry literally is percent-encoded,
      so the key is always a single safe path segment ("a/b" -> "a%2fb");
      the sub-delimiters $ & + : = @ stay as they are ("a:b" -> "a:b")
    - existing "%" escapes are left alone and hex digits are lower-cased,
      which keeps normalize(normalize(x)) == normalize(x)
"""

from urllib.parse import quote


def normalize(short: str) -> str:
    """Return the canonical storage key for a short display name."""
    key = short.replace("-", "").lower()
    return quote(key, safe="%$&+:=@").lower()

"""Device fingerprint extraction from request headers.

Executors disagree on the header that carries the device id, so every header
whose lower-cased name contains one of ``FINGERPRINT_PATTERNS`` is a candidate.
Headers are visited in ascending lower-cased name order (repeated names keep
their arrival order) and the LAST candidate with a non-empty value wins.

A caller sending several identity-like headers therefore gets the one whose
name sorts last, not an error. This is weak: a client can shadow the real
device id with e.g. ``X-Zz-Hwid``. Keep the rule stable; hardening it is
a separate change that needs executor-specific header names.
"""

from typing import Iterable, Mapping, Optional, Union

FINGERPRINT_PATTERNS = ("fingerprint", "hwid", "identifier")

HeaderSource = Union[Mapping[str, str], Iterable[tuple[str, str]]]


def _header_pairs(headers: HeaderSource) -> list[tuple[str, str]]:
    if hasattr(headers, "items"):
        return list(headers.items())
    return list(headers)


def is_fingerprint_header(name: str) -> bool:
    lowered = name.lower()
    return any(pattern in lowered for pattern in FINGERPRINT_PATTERNS)


def extract_fingerprint(headers: HeaderSource) -> Optional[str]:
    """Pick the device fingerprint from a set of headers, or None."""
    fingerprint = None
    pairs = sorted(_header_pairs(headers), key=lambda pair: pair[0].lower())
    for name, value in pairs:
        if is_fingerprint_header(name) and value:
            fingerprint = value
    return fingerprint

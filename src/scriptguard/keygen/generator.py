"""
Random identifier generation for projects, license keys and API keys.

License key format: {PREFIX}-{AAAAA}-{BBBBB}-{CCCCC}-{DDDDD}
- short uppercase prefix
- 4 segments x 5 base32 chars = 20 random chars (32^20 ≈ 10^30 unique keys)

Project ids and API keys are plain alphanumeric strings with a random length,
so ids of different projects do not line up visually.
"""

import os
import secrets
import string

# Base32 alphabet (uppercase + digits 2-7, no 0/1/8/9 to avoid ambiguity)
BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
ALPHANUMERIC = string.ascii_letters + string.digits
SEGMENT_LEN = 5
RANDOM_SEGMENTS = 4
KEY_PREFIX = "SG"
API_KEY_PREFIX = "sgt_"

PROJECT_ID_LENGTH = (15, 20)
API_KEY_LENGTH = (25, 30)


def _random_segment() -> str:
    """Generate a random 5-char base32 segment."""
    return "".join(
        BASE32_ALPHABET[b % 32] for b in os.urandom(SEGMENT_LEN)
    )


def random_string(min_len: int, max_len: int) -> str:
    """Random alphanumeric string with a length in [min_len, max_len]."""
    length = min_len + secrets.randbelow(max_len - min_len + 1)
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))


def generate_license_key(prefix: str = KEY_PREFIX) -> str:
    """Generate a license key token for a key record."""
    segments = [_random_segment() for _ in range(RANDOM_SEGMENTS)]
    return f"{prefix.upper()}-" + "-".join(segments)


def generate_project_id() -> str:
    return random_string(*PROJECT_ID_LENGTH)


def generate_api_key() -> str:
    return API_KEY_PREFIX + random_string(*API_KEY_LENGTH)

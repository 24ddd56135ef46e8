"""
Random code and token generators: pure, side-effect-free functions.

All generators use cryptographically secure sources (``secrets`` module).
"""

from __future__ import annotations

import secrets
import string


OTP_LENGTH = 6


def generate_otp_code(length: int = OTP_LENGTH) -> str:
    """Generate a cryptographically secure numeric OTP.

    Args:
        length: Number of digits (default 6).

    Returns:
        String of random decimal digits (leading zeros allowed).
    """
    return "".join(secrets.choice(string.digits) for _ in range(length))


def generate_session_id(length: int = 32) -> str:
    """Generate an opaque, URL-safe session identifier.

    Args:
        length: Number of random bytes before base64 encoding (default 32).
    """
    return secrets.token_urlsafe(length)

"""JWT signing helpers for state tokens and bearer session tokens."""

import logging
import re
from datetime import datetime, timedelta, UTC

from jose import jwt, JWTError
from jose.exceptions import JWKError, JWSError

import config
from auth.errors import ConfigurationError, ValidationError
from auth.schemas import SessionClaims, SessionUser
from auth.secret_provider import get_signing_secret

logger = logging.getLogger(__name__)

_DURATION = re.compile(r"^(-?\d+(?:\.\d+)?)\s*([a-z]*)$", re.IGNORECASE)

_UNIT_SECONDS = {
    "ms": 0.001, "msec": 0.001, "msecs": 0.001,
    "millisecond": 0.001, "milliseconds": 0.001,
    "": 1, "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
    "y": 31557600, "yr": 31557600, "yrs": 31557600, "year": 31557600, "years": 31557600,
}


def parse_expires_in(value: str | int | float) -> timedelta:
    """
    Parse a token lifetime such as ``"24h"``, ``"7d"``, ``"2 days"`` or ``3600``.

    Bare numbers (and unitless numeric strings) are seconds.

    Raises:
        ValidationError: If the value is not a positive duration of at least a second
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid expiresIn: {value!r}")
    if not isinstance(value, (int, float)):
        match = _DURATION.fullmatch(value.strip())
        if not match or match.group(2).lower() not in _UNIT_SECONDS:
            raise ValidationError(f"Invalid expiresIn: {value!r}")

    try:
        if isinstance(value, (int, float)):
            seconds = float(value)
        else:
            seconds = float(match.group(1)) * _UNIT_SECONDS[match.group(2).lower()]
        if seconds < 1:
            raise ValidationError(f"expiresIn must be at least one second, got {value!r}")
        return timedelta(seconds=seconds)
    except OverflowError as e:
        raise ValidationError(f"expiresIn is too large: {value!r}") from e


def encode_token(claims: dict, secret: str) -> str:
    """
    Sign claims with the configured algorithm.

    Raises:
        ConfigurationError: If JWT_ALGORITHM cannot sign with the secret
    """
    try:
        return jwt.encode(claims, secret, algorithm=config.settings.JWT_ALGORITHM)
    except (JWSError, JWKError) as e:
        logger.error("Token signing with %s failed: %s", config.settings.JWT_ALGORITHM, e)
        raise ConfigurationError(
            f"Token signing failed with JWT_ALGORITHM={config.settings.JWT_ALGORITHM}"
        ) from e


def decode_token(token: str, secret: str) -> dict:
    """
    Verify signature and expiry and return the raw claims.

    Raises:
        JWTError: If token is invalid or expired
    """
    return jwt.decode(token, secret, algorithms=[config.settings.JWT_ALGORITHM])


def create_session_token(user: SessionUser, expires_in_hours: int | None = None) -> str:
    """
    Create a bearer session token for a signed-in user.

    Args:
        user: The mapped identity-provider profile
        expires_in_hours: Lifetime override (default settings.SESSION_EXPIRES_HOURS)

    Returns:
        Encoded JWT token string
    """
    hours = expires_in_hours or config.settings.SESSION_EXPIRES_HOURS
    exp = datetime.now(UTC) + timedelta(hours=hours)

    payload = user.model_dump(by_alias=True)
    payload["sub"] = user.id
    payload["exp"] = int(exp.timestamp())

    return encode_token(payload, get_signing_secret())


def decode_session_token(token: str) -> SessionClaims:
    """
    Decode and validate a bearer session token.

    Raises:
        JWTError: If token is invalid, expired or has an unexpected shape
    """
    try:
        payload = decode_token(token, get_signing_secret())
        return SessionClaims.model_validate(payload)
    except JWTError as e:
        raise JWTError(f"Invalid token: {str(e)}") from e
    except ValueError as e:
        raise JWTError(f"Invalid token claims: {str(e)}") from e

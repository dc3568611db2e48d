"""
Logging Sanitizer Utility

Provides utilities to sanitize request payloads before logging.
Prevents accidental logging of passwords, bearer tokens, and other secrets.
"""

from typing import Dict, Any


# Fields that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'password_confirm',
    'confirm_password',
    'confirmpassword',
    'current_password',
    'new_password',
    'secret',
    'token',
    'api_key',
    'auth_token',
    'auth-token',
    'access_token',
    'refresh_token',
    'authorization',
}


def sanitize_dict(data: Dict[str, Any], redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Sanitize a dictionary by replacing sensitive field values with redaction text.

    Args:
        data: Dictionary to sanitize
        redact_text: Text to use for redacted values (default: '[REDACTED]')

    Returns:
        Sanitized copy with sensitive values replaced

    Example:
        >>> sanitize_dict({'email': 'a@example.com', 'password': 'secret123'})
        {'email': 'a@example.com', 'password': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_FIELDS:
            sanitized[key] = redact_text
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, redact_text)
        else:
            sanitized[key] = value

    return sanitized


def sanitize_exception_message(exception: Exception) -> str:
    """
    Sanitize exception messages to ensure they don't echo secrets.

    Args:
        exception: Exception to sanitize

    Returns:
        Sanitized exception message
    """
    message = str(exception)

    if any(field in message.lower() for field in SENSITIVE_FIELDS):
        return f"{type(exception).__name__}: [Message contains sensitive data]"

    return message

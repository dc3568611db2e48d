"""
Test the logging sanitizer utility.
Verifies passwords and tokens are redacted before payloads reach the logs.
"""

from asset_tracker.utils.logging_sanitizer import SENSITIVE_FIELDS, sanitize_dict, sanitize_exception_message


def test_sanitize_dict():
    result = sanitize_dict({'email': 'alice@example.com', 'password': 'secret123', 'name': 'Alice'})
    assert result['email'] == 'alice@example.com', "Email should not be redacted"
    assert result['password'] == '[REDACTED]', "Password should be redacted"
    assert result['name'] == 'Alice'

    result = sanitize_dict({'token': 'xyz', 'Authorization': 'Bearer xyz', 'auth-token': 'xyz'})
    assert set(result.values()) == {'[REDACTED]'}, "Token fields should be redacted regardless of case"

    result = sanitize_dict({'user': {'email': 'bob@example.com', 'PASSWORD': 'hunter22'}, 'role': 'USER'})
    assert result['user']['email'] == 'bob@example.com', "Nested email should not be redacted"
    assert result['user']['PASSWORD'] == '[REDACTED]', "Nested password should be redacted"
    assert result['role'] == 'USER'


def test_sanitize_dict_keeps_input_untouched():
    payload = {'password': 'secret123'}
    sanitize_dict(payload, redact_text='***')
    assert payload == {'password': 'secret123'}
    assert sanitize_dict({}) == {}
    assert sanitize_dict(None) is None


def test_sanitize_exception_message():
    assert sanitize_exception_message(ValueError("Asset not found")) == "Asset not found"

    message = sanitize_exception_message(RuntimeError("bad password for alice"))
    assert message == "RuntimeError: [Message contains sensitive data]"
    assert 'alice' not in message


def test_sensitive_fields_are_lowercase():
    assert all(field == field.lower() for field in SENSITIVE_FIELDS)
    assert {'password', 'token', 'authorization'} <= SENSITIVE_FIELDS

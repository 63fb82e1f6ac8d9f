"""
bcrypt only looks at the first 72 bytes of a secret, and bcrypt>=5 refuses
longer ones outright. Inputs are measured in UTF-8 bytes, not characters.
"""

MAX_PASSWORD_BYTES = 72
PASSWORD_TOO_LONG = f"The password may not be greater than {MAX_PASSWORD_BYTES} bytes."


def exceeds_bcrypt_limit(password: str) -> bool:
    return len(password.encode()) > MAX_PASSWORD_BYTES

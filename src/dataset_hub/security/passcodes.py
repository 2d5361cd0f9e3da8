from __future__ import annotations

import hmac


def verify_passcode(stored: str | None, supplied: str | None) -> bool:
    """Exact, case-sensitive passcode match.

    Passcodes are stored in plaintext. Every caller goes through this function,
    so switching to hashed credentials only touches this module.
    """
    if stored is None or supplied is None:
        return False
    # compare_digest rejects non-ASCII str, so compare the UTF-8 bytes
    return hmac.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


__all__ = ["verify_passcode"]

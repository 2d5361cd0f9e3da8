from .passcodes import verify_passcode

__all__ = ["verify_passcode"]

"""Verification failures.

Each failure carries the identifier it concerns and a client-safe message.
"""


class VerificationError(Exception):
    message = "Verification failed"

    def __init__(self, identifier: str, message: str | None = None):
        self.identifier = identifier
        if message is not None:
            self.message = message
        super().__init__(self.message)


class CodeNotFound(VerificationError):
    message = "OTP not found or expired"


class CodeExpired(VerificationError):
    message = "OTP expired"


class CodeMismatch(VerificationError):
    message = "Invalid OTP"

    def __init__(self, identifier: str, attempts_remaining: int, message: str | None = None):
        self.attempts_remaining = attempts_remaining
        super().__init__(identifier, message)


class AttemptsExceeded(VerificationError):
    message = "Too many failed attempts. Request a new code"


class DeliveryFailed(VerificationError):
    message = "Failed to send verification code"

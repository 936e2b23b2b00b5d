"""Exceptions raised by the Kinesis client wrapper."""

from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError


class KinesisError(Exception):
    """A Kinesis request failed at the service or transport level."""

    def __init__(self, message: str, code: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.operation = operation

    @classmethod
    def from_botocore(cls, error: Exception, operation: str) -> 'KinesisError':
        """Build a KinesisError from a botocore exception."""
        if isinstance(error, ClientError):
            err = error.response.get('Error', {})
            code = err.get('Code', 'Unknown')
            message = err.get('Message') or str(error)
            return cls(f"{operation} failed ({code}): {message}", code=code, operation=operation)

        if isinstance(error, BotoCoreError):
            return cls(f"{operation} failed: {error}", code=type(error).__name__, operation=operation)

        return cls(f"{operation} failed: {error}", operation=operation)

"""
Kinesis Harness - checks for a typed Amazon Kinesis Data Streams client.

This package wraps the Kinesis API in typed request/response models and
polls the service's eventually consistent operations (stream activation,
record visibility) with a bounded retry engine.
"""

__version__ = "1.0.0"
__author__ = "Kinesis Harness Team"

"""Polling helpers for the service's eventually consistent behaviour."""

import logging
from typing import Optional

from .clients.kinesis_client import KinesisClient
from .config.settings import RetryConfig
from .models import Record, ShardIteratorType, StreamDescription, StreamStatus
from .utils.retry import Failure, Outcome, Success, attempt, derive_budget, retry_with_config

logger = logging.getLogger(__name__)

DEFAULT_ACTIVE_WAIT_SECONDS = 64
DEFAULT_RECORD_ATTEMPTS = 5


def wait_active(
    client: KinesisClient,
    stream_name: str,
    seconds: int = DEFAULT_ACTIVE_WAIT_SECONDS,
    retry_config: Optional[RetryConfig] = None
) -> Outcome:
    """
    Wait for a stream to become active.

    Args:
        client: Kinesis client
        stream_name: Stream to describe
        seconds: Upper bound on the number of seconds to wait. The number of
            retries is ``floor(log2(seconds))``.
        retry_config: Backoff settings

    Returns:
        ``Success`` with the ``StreamDescription``, or the last ``Failure``
    """
    def check() -> Outcome:
        described = attempt(client.describe_stream, stream_name)
        if not described.ok:
            return described

        description: StreamDescription = described.value.stream_description
        if description.stream_status != StreamStatus.ACTIVE:
            return Failure("Stream is not active")
        return Success(description)

    budget = derive_budget(seconds)
    logger.debug(f"Waiting for stream {stream_name} to become active ({budget} retries)")
    return retry_with_config(budget, check, retry_config or RetryConfig())


def wait_single_record(
    client: KinesisClient,
    stream_name: str,
    shard_id: str,
    attempts: int = DEFAULT_RECORD_ATTEMPTS,
    retry_config: Optional[RetryConfig] = None
) -> Outcome:
    """
    Wait until a shard holds exactly one record and return it.

    Every attempt reads from a fresh ``TRIM_HORIZON`` iterator. More than one
    record is reported as a failure, never picked from.
    """
    def check() -> Outcome:
        iterator = attempt(
            client.get_shard_iterator,
            stream_name,
            shard_id,
            ShardIteratorType.TRIM_HORIZON
        )
        if not iterator.ok:
            return iterator

        fetched = attempt(client.get_records, iterator.value.shard_iterator)
        if not fetched.ok:
            return fetched

        records = fetched.value.records
        if not records:
            return Failure("no record found in stream")
        if len(records) > 1:
            return Failure(f"unexpected records found in stream: {_describe_records(records)}")
        return Success(records[0])

    return retry_with_config(attempts, check, retry_config or RetryConfig())


def _describe_records(records) -> str:
    return "[" + ", ".join(_describe_record(r) for r in records) + "]"


def _describe_record(record: Record) -> str:
    return (
        f"Record(sequence_number={record.sequence_number}, "
        f"partition_key={record.partition_key!r}, data={record.data!r})"
    )

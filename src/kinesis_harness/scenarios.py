"""Live scenarios exercising the Kinesis client against a real endpoint.

Each scenario returns an ``Outcome``; a ``Failure`` carries the diagnostic
that is reported for the scenario.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple

from .clients.errors import KinesisError
from .clients.kinesis_client import KinesisClient
from .config.settings import HarnessSettings, RetryConfig
from .utils.retry import Failure, Outcome, Success, attempt
from .waiters import DEFAULT_ACTIVE_WAIT_SECONDS, DEFAULT_RECORD_ATTEMPTS, wait_active, wait_single_record

logger = logging.getLogger(__name__)

MAX_STREAM_NAME_LENGTH = 128


def test_stream_name(name: str, prefix: str) -> str:
    """Prefix a stream name so test streams never collide with real ones."""
    full_name = f"{prefix}-{name}" if prefix else name
    return full_name[:MAX_STREAM_NAME_LENGTH]


# Not a pytest test despite the name
test_stream_name.__test__ = False


@contextmanager
def with_stream(client: KinesisClient, stream_name: str, shard_count: int) -> Iterator[str]:
    """Create a stream for the duration of the block, deleting it afterwards."""
    client.create_stream(stream_name, shard_count)
    try:
        yield stream_name
    finally:
        try:
            client.delete_stream(stream_name)
        except KinesisError as e:
            logger.error(f"Failed to delete stream {stream_name}: {e}")


def prop_stream_list(client: KinesisClient, stream_name: str) -> Outcome:
    listed = attempt(client.list_all_streams)
    if not listed.ok:
        return listed

    if stream_name not in listed.value:
        return Failure(f"stream {stream_name} is not listed")
    return Success(None)


def prop_stream_describe(
    client: KinesisClient,
    stream_name: str,
    shard_count: int,
    wait_seconds: int = DEFAULT_ACTIVE_WAIT_SECONDS,
    retry_config: Optional[RetryConfig] = None
) -> Outcome:
    active = wait_active(client, stream_name, wait_seconds, retry_config)
    if not active.ok:
        return active
    description = active.value

    if description.stream_name != stream_name:
        return Failure(f"unexpected stream name in description: {description.stream_name}")

    count = len(description.shards)
    if count != shard_count:
        return Failure(f"unexpected number of shards in stream description: {count}")

    return Success(description)


def prop_stream_put_get(
    client: KinesisClient,
    stream_name: str,
    data: bytes,
    partition_key: str,
    wait_seconds: int = DEFAULT_ACTIVE_WAIT_SECONDS,
    record_attempts: int = DEFAULT_RECORD_ATTEMPTS,
    retry_config: Optional[RetryConfig] = None
) -> Outcome:
    """Write one record and read it back from the shard it landed on."""
    active = wait_active(client, stream_name, wait_seconds, retry_config)
    if not active.ok:
        return active

    shard_ids = [shard.shard_id for shard in active.value.shards]

    put = attempt(client.put_record, stream_name, data, partition_key)
    if not put.ok:
        return put
    put_seq_nr = put.value.sequence_number
    put_shard = put.value.shard_id

    if put_shard not in shard_ids:
        return Failure(f"unexpected shard id: expected one of {shard_ids}; got {put_shard}")

    fetched = wait_single_record(client, stream_name, put_shard, record_attempts, retry_config)
    if not fetched.ok:
        return fetched
    record = fetched.value

    if record.data != data:
        return Failure(f"data does not match: expected {data!r}; got {record.data!r}")

    if record.sequence_number != put_seq_nr:
        return Failure(
            f"sequence numbers don't match: expected {put_seq_nr}; got {record.sequence_number}"
        )

    if record.partition_key != partition_key:
        return Failure(
            f"partition keys don't match: expected {partition_key!r}; got {record.partition_key!r}"
        )

    return Success(record)


def prop_create_list_delete(client: KinesisClient, stream_name: str) -> Outcome:
    """Create a stream, check it is listed, delete it again."""
    created = attempt(client.create_stream, stream_name, 1)
    if not created.ok:
        return created

    try:
        listed = attempt(client.list_all_streams)
        if listed.ok and stream_name not in listed.value:
            listed = Failure(f"stream {stream_name} not listed")
    finally:
        deleted = attempt(client.delete_stream, stream_name)

    # Delete failure is reported before a listing failure
    if not deleted.ok:
        if not listed.ok:
            logger.error(f"Listing failed before delete of {stream_name}: {listed.reason}")
        return deleted
    if not listed.ok:
        return listed
    return Success(None)


@dataclass
class ScenarioResult:
    name: str
    outcome: Outcome
    duration_seconds: float = 0.0

    @property
    def passed(self) -> bool:
        return self.outcome.ok


@dataclass
class ScenarioReport:
    """Results of a scenario run, in execution order."""
    results: List[ScenarioResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failures(self) -> List[ScenarioResult]:
        return [result for result in self.results if not result.passed]

    def run(self, name: str, scenario: Callable[[], Outcome]) -> ScenarioResult:
        logger.info(f"Running scenario: {name}")
        start_time = time.time()
        try:
            outcome = scenario()
        except KinesisError as e:
            outcome = Failure(str(e))

        result = ScenarioResult(name, outcome, time.time() - start_time)
        self.results.append(result)

        if result.passed:
            logger.info(f"Scenario passed: {name} ({result.duration_seconds:.2f}s)")
        else:
            logger.error(f"Scenario failed: {name}: {outcome.reason}")
        return result


def run_all(client: KinesisClient, settings: HarnessSettings) -> ScenarioReport:
    """
    Run every scenario group.

    The stream creation group uses its own stream. The remaining scenarios
    share one stream that lives for the duration of the group.
    """
    config = settings.scenarios
    retry_config = settings.retry
    report = ScenarioReport()

    report.run(
        "stream creation: create list delete",
        lambda: prop_create_list_delete(
            client, test_stream_name(f"{config.stream_name}-create", config.stream_prefix)
        )
    )

    stream = test_stream_name(config.stream_name, config.stream_prefix)
    group: List[Tuple[str, Callable[[], Outcome]]] = [
        ("single stream: list streams", lambda: prop_stream_list(client, stream)),
        ("single stream: describe stream", lambda: prop_stream_describe(
            client, stream, config.shard_count, config.active_wait_seconds, retry_config
        )),
        ("single stream: put and get stream", lambda: prop_stream_put_get(
            client, stream, config.payload.encode('utf-8'), config.partition_key,
            config.active_wait_seconds, config.record_visibility_attempts, retry_config
        )),
    ]

    try:
        with with_stream(client, stream, config.shard_count):
            for name, scenario in group:
                report.run(name, scenario)
    except KinesisError as e:
        for name, _ in group:
            report.results.append(ScenarioResult(name, Failure(str(e))))

    return report

"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Dict, Sequence
from unittest.mock import Mock

import boto3
from moto import mock_aws

from kinesis_harness.clients.kinesis_client import KinesisClient
from kinesis_harness.config.settings import HarnessSettings, RetryConfig, ScenarioConfig


@pytest.fixture
def aws_credentials(monkeypatch):
    """Dummy credentials so boto3 never touches a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def boto_kinesis(aws_credentials):
    """boto3 Kinesis client backed by moto."""
    with mock_aws():
        yield boto3.client("kinesis", region_name="us-east-1")


@pytest.fixture
def kinesis_client(boto_kinesis) -> KinesisClient:
    return KinesisClient(boto_kinesis)


@pytest.fixture
def fast_retry() -> RetryConfig:
    """Retry settings without any sleeping."""
    return RetryConfig(initial_backoff_seconds=0.0, max_backoff_seconds=0.0, jitter=False)


@pytest.fixture
def test_settings(fast_retry) -> HarnessSettings:
    return HarnessSettings(
        retry=fast_retry,
        scenarios=ScenarioConfig(stream_prefix="test", stream_name="test-stream", shard_count=1)
    )


def make_description(
    stream_name: str = "test-stream",
    status: str = "ACTIVE",
    shard_ids: Sequence[str] = ("shardId-000000000000",)
) -> Dict[str, Any]:
    """Build a DescribeStream response the way boto3 returns it."""
    return {
        'StreamDescription': {
            'StreamName': stream_name,
            'StreamARN': f"arn:aws:kinesis:us-east-1:123456789012:stream/{stream_name}",
            'StreamStatus': status,
            'Shards': [
                {
                    'ShardId': shard_id,
                    'HashKeyRange': {
                        'StartingHashKey': '0',
                        'EndingHashKey': '340282366920938463463374607431768211455'
                    },
                    'SequenceNumberRange': {
                        'StartingSequenceNumber': '49590338271490256608559692538361571095921575989136588898'
                    }
                }
                for shard_id in shard_ids
            ],
            'HasMoreShards': False,
        },
        'ResponseMetadata': {'HTTPStatusCode': 200},
    }


def make_record(data: bytes = b"dat", key: str = "key", seq: str = "1") -> Dict[str, Any]:
    return {'Data': data, 'PartitionKey': key, 'SequenceNumber': seq}


@pytest.fixture
def mock_boto_kinesis():
    """Mock boto3 Kinesis client."""
    client = Mock()
    client.describe_stream = Mock(return_value=make_description())
    client.get_shard_iterator = Mock(return_value={'ShardIterator': 'AAAAiterator'})
    client.get_records = Mock(return_value={'Records': [], 'NextShardIterator': 'AAAAnext'})
    return client


@pytest.fixture
def mock_kinesis_client(mock_boto_kinesis) -> KinesisClient:
    return KinesisClient(mock_boto_kinesis)


@pytest.fixture
def describe_response():
    """Factory for DescribeStream responses."""
    return make_description


@pytest.fixture
def record_response():
    """Factory for raw records as returned by GetRecords."""
    return make_record

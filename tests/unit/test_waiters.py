"""Tests for the stream activation and record visibility waiters."""

import pytest
from botocore.exceptions import ClientError

from kinesis_harness.models import StreamStatus
from kinesis_harness.waiters import wait_active, wait_single_record


def not_found():
    return ClientError(
        error_response={'Error': {'Code': 'ResourceNotFoundException', 'Message': 'Stream not found'}},
        operation_name='DescribeStream'
    )


@pytest.mark.unit
class TestWaitActive:

    def test_active_immediately(self, mock_kinesis_client, mock_boto_kinesis, fast_retry):
        outcome = wait_active(mock_kinesis_client, "test-stream", 64, fast_retry)

        assert outcome.ok
        assert outcome.value.stream_status == StreamStatus.ACTIVE
        assert mock_boto_kinesis.describe_stream.call_count == 1

    def test_waits_while_creating(self, mock_kinesis_client, mock_boto_kinesis, describe_response, fast_retry):
        mock_boto_kinesis.describe_stream.side_effect = [
            describe_response(status="CREATING"),
            describe_response(status="CREATING"),
            describe_response(status="ACTIVE"),
        ]

        outcome = wait_active(mock_kinesis_client, "test-stream", 64, fast_retry)

        assert outcome.ok
        assert mock_boto_kinesis.describe_stream.call_count == 3

    def test_budget_from_wait_seconds(self, mock_kinesis_client, mock_boto_kinesis, describe_response, fast_retry):
        mock_boto_kinesis.describe_stream.return_value = describe_response(status="CREATING")

        outcome = wait_active(mock_kinesis_client, "test-stream", 64, fast_retry)

        assert not outcome.ok
        assert outcome.reason == "Stream is not active"
        # floor(log2(64)) = 6 retries after the first attempt
        assert mock_boto_kinesis.describe_stream.call_count == 7

    def test_one_second_allows_no_retry(self, mock_kinesis_client, mock_boto_kinesis, describe_response, fast_retry):
        mock_boto_kinesis.describe_stream.return_value = describe_response(status="CREATING")

        outcome = wait_active(mock_kinesis_client, "test-stream", 1, fast_retry)

        assert not outcome.ok
        assert mock_boto_kinesis.describe_stream.call_count == 1

    def test_service_errors_are_retried(self, mock_kinesis_client, mock_boto_kinesis, describe_response, fast_retry):
        mock_boto_kinesis.describe_stream.side_effect = [not_found(), describe_response()]

        outcome = wait_active(mock_kinesis_client, "test-stream", 4, fast_retry)

        assert outcome.ok

    def test_last_service_error_reported(self, mock_kinesis_client, mock_boto_kinesis, fast_retry):
        mock_boto_kinesis.describe_stream.side_effect = not_found()

        outcome = wait_active(mock_kinesis_client, "test-stream", 2, fast_retry)

        assert not outcome.ok
        assert "ResourceNotFoundException" in outcome.reason
        assert mock_boto_kinesis.describe_stream.call_count == 2


@pytest.mark.unit
class TestWaitSingleRecord:

    def test_record_visible_after_lag(self, mock_kinesis_client, mock_boto_kinesis, record_response, fast_retry):
        mock_boto_kinesis.get_records.side_effect = [
            {'Records': []},
            {'Records': []},
            {'Records': [record_response(b"dat", "key", "17")]},
        ]

        outcome = wait_single_record(mock_kinesis_client, "test-stream", "shardId-000000000000", 5, fast_retry)

        assert outcome.ok
        assert outcome.value.data == b"dat"
        assert outcome.value.sequence_number == "17"
        # A fresh iterator for every attempt
        assert mock_boto_kinesis.get_shard_iterator.call_count == 3
        mock_boto_kinesis.get_shard_iterator.assert_called_with(
            StreamName="test-stream", ShardId="shardId-000000000000", ShardIteratorType="TRIM_HORIZON"
        )

    def test_no_record(self, mock_kinesis_client, mock_boto_kinesis, fast_retry):
        outcome = wait_single_record(mock_kinesis_client, "test-stream", "shardId-000000000000", 5, fast_retry)

        assert not outcome.ok
        assert outcome.reason == "no record found in stream"
        assert mock_boto_kinesis.get_records.call_count == 6

    def test_multiple_records_never_succeed(self, mock_kinesis_client, mock_boto_kinesis, record_response, fast_retry):
        mock_boto_kinesis.get_records.return_value = {
            'Records': [record_response(seq="1"), record_response(seq="2")]
        }

        outcome = wait_single_record(mock_kinesis_client, "test-stream", "shardId-000000000000", 2, fast_retry)

        assert not outcome.ok
        assert outcome.reason.startswith("unexpected records found in stream: ")
        assert "sequence_number=1" in outcome.reason
        assert "sequence_number=2" in outcome.reason
        assert mock_boto_kinesis.get_records.call_count == 3

    def test_multiple_then_single_record(self, mock_kinesis_client, mock_boto_kinesis, record_response, fast_retry):
        mock_boto_kinesis.get_records.side_effect = [
            {'Records': [record_response(seq="1"), record_response(seq="2")]},
            {'Records': [record_response(seq="1")]},
        ]

        outcome = wait_single_record(mock_kinesis_client, "test-stream", "shardId-000000000000", 5, fast_retry)

        assert outcome.ok
        assert outcome.value.sequence_number == "1"

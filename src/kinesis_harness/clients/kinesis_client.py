"""Typed AWS Kinesis Data Streams client."""

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..config.aws_config import AWSClientManager
from ..models import (
    DescribeStreamResponse,
    GetRecordsResponse,
    GetShardIteratorResponse,
    ListStreamsResponse,
    PutRecordResponse,
    ShardIteratorType,
)
from .errors import KinesisError

logger = logging.getLogger(__name__)


class KinesisClient:
    """
    Thin typed wrapper around the boto3 Kinesis client.

    Every request returns one of the response models from ``models``.
    Service and transport errors are raised as ``KinesisError``.
    """

    def __init__(self, kinesis_client):
        self.kinesis_client = kinesis_client

    @classmethod
    def from_manager(cls, aws_client_manager: AWSClientManager) -> 'KinesisClient':
        return cls(aws_client_manager.kinesis_client)

    def _call(self, operation: str, **params) -> Dict[str, Any]:
        method = getattr(self.kinesis_client, operation)
        # boto3 rejects explicit None values
        request = {key: value for key, value in params.items() if value is not None}

        logger.debug(f"Kinesis {operation}: {sorted(request)}")
        try:
            return method(**request)
        except (ClientError, BotoCoreError) as e:
            error = KinesisError.from_botocore(e, operation)
            logger.debug(str(error))
            raise error from e

    def create_stream(self, stream_name: str, shard_count: int) -> None:
        """Request creation of a stream. The stream starts out CREATING."""
        self._call('create_stream', StreamName=stream_name, ShardCount=shard_count)
        logger.info(f"Requested stream {stream_name} with {shard_count} shard(s)")

    def delete_stream(self, stream_name: str) -> None:
        self._call('delete_stream', StreamName=stream_name)
        logger.info(f"Requested deletion of stream {stream_name}")

    def describe_stream(
        self,
        stream_name: str,
        limit: Optional[int] = None,
        exclusive_start_shard_id: Optional[str] = None
    ) -> DescribeStreamResponse:
        response = self._call(
            'describe_stream',
            StreamName=stream_name,
            Limit=limit,
            ExclusiveStartShardId=exclusive_start_shard_id
        )
        return DescribeStreamResponse.model_validate(response)

    def list_streams(
        self,
        limit: Optional[int] = None,
        exclusive_start_stream_name: Optional[str] = None
    ) -> ListStreamsResponse:
        response = self._call(
            'list_streams',
            Limit=limit,
            ExclusiveStartStreamName=exclusive_start_stream_name
        )
        return ListStreamsResponse.model_validate(response)

    def list_all_streams(self) -> List[str]:
        """List every stream name, following ``HasMoreStreams`` pagination."""
        names: List[str] = []
        start = None

        while True:
            page = self.list_streams(exclusive_start_stream_name=start)
            names.extend(page.stream_names)
            if not page.has_more_streams or not page.stream_names:
                return names
            start = page.stream_names[-1]

    def put_record(
        self,
        stream_name: str,
        data: bytes,
        partition_key: str,
        explicit_hash_key: Optional[str] = None,
        sequence_number_for_ordering: Optional[str] = None
    ) -> PutRecordResponse:
        response = self._call(
            'put_record',
            StreamName=stream_name,
            Data=data,
            PartitionKey=partition_key,
            ExplicitHashKey=explicit_hash_key,
            SequenceNumberForOrdering=sequence_number_for_ordering
        )
        return PutRecordResponse.model_validate(response)

    def get_shard_iterator(
        self,
        stream_name: str,
        shard_id: str,
        iterator_type: ShardIteratorType,
        starting_sequence_number: Optional[str] = None
    ) -> GetShardIteratorResponse:
        response = self._call(
            'get_shard_iterator',
            StreamName=stream_name,
            ShardId=shard_id,
            ShardIteratorType=ShardIteratorType(iterator_type).value,
            StartingSequenceNumber=starting_sequence_number
        )
        return GetShardIteratorResponse.model_validate(response)

    def get_records(self, shard_iterator: str, limit: Optional[int] = None) -> GetRecordsResponse:
        response = self._call('get_records', ShardIterator=shard_iterator, Limit=limit)
        return GetRecordsResponse.model_validate(response)

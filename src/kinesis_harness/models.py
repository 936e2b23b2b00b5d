"""Wire-format types for Kinesis Data Streams requests and responses.

Field names follow the service's JSON (PascalCase) through aliases, so a
model dumped with ``by_alias=True`` matches what the API sends and accepts.
"""

import base64
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Optional, Type, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationInfo,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_pascal

T = TypeVar('T')

MAX_PARTITION_HASH = 2 ** 128 - 1


def _check_partition_hash(value: str) -> str:
    if int(value) > MAX_PARTITION_HASH:
        raise ValueError(f"partition hash out of range: {value}")
    return value


StreamName = Annotated[str, StringConstraints(min_length=1, max_length=128, pattern=r'^[a-zA-Z0-9_.\-]+$')]
ShardId = Annotated[str, StringConstraints(min_length=1, max_length=128, pattern=r'^[a-zA-Z0-9_.\-]+$')]
SequenceNumber = Annotated[str, StringConstraints(pattern=r'^(0|[1-9][0-9]{0,127})$')]
PartitionHash = Annotated[str, StringConstraints(pattern=r'^(0|[1-9][0-9]{0,38})$'), AfterValidator(_check_partition_hash)]
PartitionKey = Annotated[str, StringConstraints(min_length=1, max_length=256)]
ShardIterator = Annotated[str, StringConstraints(min_length=1, max_length=512)]


class ShardIteratorType(str, Enum):
    """Where a shard iterator starts reading."""
    AT_SEQUENCE_NUMBER = "AT_SEQUENCE_NUMBER"
    AFTER_SEQUENCE_NUMBER = "AFTER_SEQUENCE_NUMBER"
    TRIM_HORIZON = "TRIM_HORIZON"
    LATEST = "LATEST"


class StreamStatus(str, Enum):
    """Lifecycle status of a stream."""
    CREATING = "CREATING"
    DELETING = "DELETING"
    ACTIVE = "ACTIVE"
    UPDATING = "UPDATING"


class KinesisModel(BaseModel):
    """Base model using the service's PascalCase JSON field names."""
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra='ignore',
    )


class HashKeyRange(KinesisModel):
    starting_hash_key: PartitionHash
    ending_hash_key: PartitionHash


class SequenceNumberRange(KinesisModel):
    starting_sequence_number: SequenceNumber
    ending_sequence_number: Optional[SequenceNumber] = None


class Shard(KinesisModel):
    """A partition of a stream's record sequence."""
    shard_id: ShardId
    parent_shard_id: Optional[ShardId] = None
    adjacent_parent_shard_id: Optional[ShardId] = None
    hash_key_range: HashKeyRange
    sequence_number_range: SequenceNumberRange


class Record(KinesisModel):
    """A data record read from a shard. ``data`` is base64 on the wire."""
    data: bytes
    partition_key: PartitionKey
    sequence_number: SequenceNumber
    approximate_arrival_timestamp: Optional[datetime] = None

    @field_validator('data', mode='before')
    @classmethod
    def _decode_data(cls, value: Any, info: ValidationInfo) -> Any:
        if info.mode == 'json' and isinstance(value, str):
            return base64.b64decode(value, validate=True)
        return value

    @field_serializer('data', when_used='json')
    def _encode_data(self, value: bytes) -> str:
        return base64.b64encode(value).decode('ascii')


class StreamDescription(KinesisModel):
    """Result body of DescribeStream."""
    stream_name: StreamName
    stream_arn: str = Field(alias='StreamARN')
    stream_status: StreamStatus
    shards: List[Shard] = Field(default_factory=list)
    has_more_shards: bool = False
    retention_period_hours: Optional[int] = None
    stream_creation_timestamp: Optional[datetime] = None


class DescribeStreamResponse(KinesisModel):
    stream_description: StreamDescription


class ListStreamsResponse(KinesisModel):
    has_more_streams: bool = False
    stream_names: List[StreamName] = Field(default_factory=list)


class PutRecordResponse(KinesisModel):
    sequence_number: SequenceNumber
    shard_id: ShardId


class GetShardIteratorResponse(KinesisModel):
    shard_iterator: ShardIterator


class GetRecordsResponse(KinesisModel):
    next_shard_iterator: Optional[ShardIterator] = None
    records: List[Record] = Field(default_factory=list)
    millis_behind_latest: Optional[int] = None


def validate(type_: Any, value: Any) -> Any:
    """
    Validate a value against one of the wire types.

    Raises:
        ValueError: If the value is not valid for the type
    """
    return TypeAdapter(type_).validate_python(value)


def to_json(value: Any, type_: Optional[Any] = None) -> str:
    """Serialise a wire value to the service's JSON representation."""
    adapter = TypeAdapter(type_ if type_ is not None else type(value))
    return adapter.dump_json(value, by_alias=True, exclude_none=True).decode('utf-8')


def from_json(type_: Type[T], text: str) -> T:
    """Parse a wire value from its JSON representation."""
    return TypeAdapter(type_).validate_json(text)

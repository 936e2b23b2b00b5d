"""AWS-specific configuration and client setup."""

import boto3
from botocore.config import Config
import logging

from .settings import AWSConfig

logger = logging.getLogger(__name__)


class AWSClientManager:
    """Manages the boto3 Kinesis client with proper configuration."""

    def __init__(self, aws_config: AWSConfig):
        self.config = aws_config
        self._kinesis_client = None

        # Timeouts bound every single request made by the harness
        self._boto_config = Config(
            region_name=aws_config.region,
            retries={
                'max_attempts': 3,
                'mode': 'adaptive'
            },
            connect_timeout=aws_config.connect_timeout_seconds,
            read_timeout=aws_config.read_timeout_seconds
        )

    @property
    def kinesis_client(self):
        """Get or create Kinesis client."""
        if self._kinesis_client is None:
            if self.config.localstack_endpoint:
                # LocalStack configuration for local development
                self._kinesis_client = boto3.client(
                    'kinesis',
                    endpoint_url=self.config.localstack_endpoint,
                    aws_access_key_id='test',
                    aws_secret_access_key='test',
                    region_name=self.config.region,
                    config=self._boto_config
                )
                logger.info(f"Created LocalStack Kinesis client: {self.config.localstack_endpoint}")
            else:
                session = boto3.Session(
                    aws_access_key_id=self.config.access_key_id,
                    aws_secret_access_key=self.config.secret_access_key,
                    profile_name=self.config.profile_name,
                    region_name=self.config.region
                )
                self._kinesis_client = session.client('kinesis', config=self._boto_config)
                logger.info(f"Created AWS Kinesis client in region: {self.config.region}")

        return self._kinesis_client

"""
Source object store: read a newly created S3 object's bytes and size
"""
from botocore.exceptions import BotoCoreError, ClientError
from shared import FetchError, ObjectPayload


class S3SourceStore:
    """Reads objects from S3 with a boto3 client; raises FetchError when the object can't be read"""

    def __init__(self, s3_client):
        self.s3_client = s3_client

    def get_object(self, bucket, key):
        try:
            response = self.s3_client.get_object(Bucket=bucket, Key=key)
            body = response.get('Body')
            payload = body.read() if body is not None else None
        except (ClientError, BotoCoreError) as e:
            raise FetchError(f"Unable to read s3://{bucket}/{key}: {e}") from e
        return ObjectPayload(payload, response.get('ContentLength'))

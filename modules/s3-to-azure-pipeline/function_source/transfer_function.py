"""
Primary transfer function: S3 -> Azure Blob Storage
Triggered by S3 ObjectCreated notifications on the source bucket (AWS Lambda).
"""
import boto3
import requests
from credentials import AWSCredentialProvider, parameter_names_from_env
from replication import ReplicationWorker
from shared import AuthError, ConfigurationError, log_structured
from sources import S3SourceStore

# Initialize clients once per Lambda execution environment
s3_client = boto3.client('s3')
ssm_client = boto3.client('ssm')
secrets_client = boto3.client('secretsmanager')
http_session = requests.Session()


def handler(event, context):
    """
    Lambda handler for an S3 event notification batch.
    Copies every created object to the Azure blob container. Per-record
    failures (malformed records included) are logged and summarized;
    configuration or auth failures fail the whole invocation.
    """
    records = (event or {}).get('Records') or []

    worker = ReplicationWorker(
        AWSCredentialProvider(ssm_client, secrets_client),
        S3SourceStore(s3_client),
        parameter_names_from_env(),
        session=http_session
    )

    try:
        result = worker.run(records)
    except (ConfigurationError, AuthError) as e:
        log_structured(
            "Replication aborted before processing any object",
            severity='ERROR',
            error=str(e),
            records=len(records)
        )
        raise

    return result.as_dict()

"""
Replication worker: one batch of S3 object-creation records -> Azure Blob Storage
"""
from azure_auth import acquire_token
from azure_upload import upload_blob
from credentials import resolve_settings
from shared import (
    BatchResult,
    FetchError,
    UploadError,
    UploadOutcome,
    event_from_s3_record,
    log_structured,
)


class ReplicationWorker:
    """
    Replicates a batch of S3 notification records to one Azure blob container.

    The token is acquired once per run() and shared by every upload in the
    batch. Records are processed in order and a failing record, malformed
    ones included, never stops the ones after it. ConfigurationError and
    AuthError abort the run before any record is touched.
    """

    def __init__(self, credentials, source_store, parameter_names, session=None):
        self.credentials = credentials
        self.source_store = source_store
        self.parameter_names = parameter_names
        self.session = session

    def run(self, records):
        settings = resolve_settings(self.credentials, self.parameter_names)
        token = acquire_token(
            settings.client_id,
            settings.client_secret,
            settings.resource,
            settings.auth_url,
            session=self.session
        )

        results = []
        for index, record in enumerate(records):
            results.append(self.replicate(index, record, settings.container_url, token))

        batch = BatchResult(results)
        log_structured(
            batch.message,
            severity='INFO' if batch.success else 'ERROR',
            total=len(batch.results),
            succeeded=batch.succeeded_count,
            failed=batch.failed_count
        )
        return batch

    def replicate(self, index, record, container_url, token):
        """Copy one object. Always returns (locator, UploadOutcome)."""
        locator = None
        try:
            event = event_from_s3_record(record)
            locator = event.locator
            log_structured(
                f"Processing object {event.key} from bucket {event.bucket}",
                severity='DEBUG',
                object=locator
            )

            source = self.source_store.get_object(event.bucket, event.key)
            if not source.payload or not source.length:
                raise FetchError("payload or length undefined")

            outcome = upload_blob(
                container_url,
                event.key,
                source.payload,
                str(source.length),
                token,
                session=self.session
            )
        except (FetchError, UploadError) as e:
            outcome = UploadOutcome.failed(e)
        except Exception as e:
            outcome = UploadOutcome.failed(f"Unexpected error: {e}")

        if outcome.status == UploadOutcome.UPLOADED:
            log_structured("Uploaded to Azure Blob Storage", object=locator)
        elif outcome.status == UploadOutcome.ACCEPTED:
            log_structured(
                "Upload accepted by Azure Blob Storage, will complete shortly",
                object=locator
            )
        else:
            log_structured(
                f"Error copying {locator or f'record {index}'} to Azure Blob Storage",
                severity='ERROR',
                object=locator,
                record_index=index,
                status=outcome.status_code,
                error=outcome.reason
            )
        return locator, outcome

"""
Shared types, errors and logging for the S3 -> Azure Blob replication function
"""
import os
import json
from collections import namedtuple
from urllib.parse import unquote_plus


SEVERITY_ORDER = ['DEBUG', 'INFO', 'NOTICE', 'WARNING', 'ERROR', 'CRITICAL']


def get_trace_id():
    """Extract the X-Ray trace ID Lambda exports for the current invocation"""
    trace_header = os.environ.get('_X_AMZN_TRACE_ID', '')
    for part in trace_header.split(';'):
        if part.startswith('Root='):
            return part[len('Root='):]
    return trace_header or None


def _severity_enabled(severity):
    threshold = os.environ.get('LOG_LEVEL', 'DEBUG').upper()
    if threshold not in SEVERITY_ORDER or severity not in SEVERITY_ORDER:
        return True
    return SEVERITY_ORDER.index(severity) >= SEVERITY_ORDER.index(threshold)


def log_structured(message, severity='INFO', **kwargs):
    """Output structured JSON log for CloudWatch

    Args:
        message: Log message
        severity: Log severity (DEBUG, INFO, WARNING, ERROR, etc)
        **kwargs: Additional fields to include in log
    """
    if not _severity_enabled(severity):
        return

    entry = {
        'message': message,
        'severity': severity,
    }

    # Add trace for correlation with the invocation's X-Ray trace
    trace_id = get_trace_id()
    if trace_id:
        entry['trace'] = trace_id

    entry.update(kwargs)

    print(json.dumps(entry, default=str))


class ReplicationError(Exception):
    """Base class for replication failures"""


class ConfigurationError(ReplicationError):
    """A required parameter or secret is missing. Fatal to the invocation."""


class AuthError(ReplicationError):
    """The token exchange with the identity provider failed. Fatal to the invocation."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class FetchError(ReplicationError):
    """The source object could not be read, or came back without payload/length."""


class UploadError(ReplicationError):
    """The remote blob endpoint rejected the upload or could not be reached."""

    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ReplicationEvent(namedtuple('ReplicationEvent', ['bucket', 'key'])):
    """A single object creation in a source bucket, key already decoded"""
    __slots__ = ()

    @property
    def locator(self):
        return f"s3://{self.bucket}/{self.key}"


ObjectPayload = namedtuple('ObjectPayload', ['payload', 'length'])


def decode_s3_key(raw_key):
    """S3 notifications URL-encode keys with '+' for spaces"""
    return unquote_plus(raw_key)


def event_from_s3_record(record):
    """
    Build the ReplicationEvent for one S3 notification record.
    Raises FetchError when the record doesn't name an S3 object.
    """
    try:
        bucket_name = record['s3']['bucket']['name']
        raw_key = record['s3']['object']['key']
    except (KeyError, TypeError) as e:
        raise FetchError("record without S3 object info") from e

    if not isinstance(bucket_name, str) or not bucket_name:
        raise FetchError("record without S3 object info")
    if not isinstance(raw_key, str) or not raw_key:
        raise FetchError("record without S3 object key")

    return ReplicationEvent(bucket_name, decode_s3_key(raw_key))


class UploadOutcome:
    """Result of replicating one object"""

    UPLOADED = 'uploaded'
    ACCEPTED = 'accepted'
    FAILED = 'failed'

    def __init__(self, status, reason=None, status_code=None, body=None):
        self.status = status
        self.reason = reason
        self.status_code = status_code
        self.body = body

    @classmethod
    def uploaded(cls, status_code=201):
        return cls(cls.UPLOADED, status_code=status_code)

    @classmethod
    def accepted(cls, status_code=202):
        return cls(cls.ACCEPTED, status_code=status_code)

    @classmethod
    def failed(cls, error):
        """Build a failed outcome from an exception or a plain reason string"""
        if isinstance(error, BaseException):
            return cls(
                cls.FAILED,
                reason=str(error),
                status_code=getattr(error, 'status_code', None),
                body=getattr(error, 'body', None)
            )
        return cls(cls.FAILED, reason=str(error))

    @property
    def succeeded(self):
        return self.status in (self.UPLOADED, self.ACCEPTED)

    def as_dict(self):
        result = {'status': self.status}
        if self.status_code is not None:
            result['status_code'] = self.status_code
        if self.reason is not None:
            result['reason'] = self.reason
        return result

    def __repr__(self):
        return f"UploadOutcome({self.status!r}, reason={self.reason!r}, status_code={self.status_code!r})"


class BatchResult:
    """Aggregate verdict over every outcome in one invocation"""

    SUCCESS_MESSAGE = "All files uploaded to Azure successfully."
    FAILURE_MESSAGE = (
        "One or more files failed to upload to Azure. "
        "Please check the logs for more details."
    )

    def __init__(self, results):
        # results: ordered list of (locator, UploadOutcome); locator is None
        # for records that never named an object
        self.results = list(results)

    @property
    def succeeded_count(self):
        return sum(1 for _, outcome in self.results if outcome.succeeded)

    @property
    def failed_count(self):
        return len(self.results) - self.succeeded_count

    @property
    def success(self):
        return self.failed_count == 0

    @property
    def message(self):
        return self.SUCCESS_MESSAGE if self.success else self.FAILURE_MESSAGE

    def as_dict(self):
        return {
            'success': self.success,
            'message': self.message,
            'total': len(self.results),
            'succeeded': self.succeeded_count,
            'failed': self.failed_count,
            'objects': [
                dict(outcome.as_dict(), object=locator)
                for locator, outcome in self.results
            ]
        }

"""
Single-shot block blob upload to an Azure Blob Storage container
"""
from email.utils import formatdate
from urllib.parse import quote
import requests
from shared import UploadError, UploadOutcome


AZURE_STORAGE_API_VERSION = '2017-11-09'

# Same set encodeURIComponent leaves alone; '/' in keys is escaped too
KEY_SAFE_CHARS = "!~*'()"


def blob_url(container_url, object_key):
    return f"{container_url.rstrip('/')}/{quote(object_key, safe=KEY_SAFE_CHARS)}"


def request_date():
    """RFC 1123 timestamp for x-ms-date"""
    return formatdate(usegmt=True)


def upload_blob(container_url, object_key, payload, content_length, token, session=None):
    """
    PUT the object's bytes as a BlockBlob.
    Returns an UploadOutcome: 201 -> uploaded, 202 -> accepted (Azure finishes
    it asynchronously), anything else -> failed. Never raises for HTTP or
    network failures.
    """
    http = session or requests
    headers = {
        'x-ms-version': AZURE_STORAGE_API_VERSION,
        'x-ms-date': request_date(),
        'Authorization': f"Bearer {token}",
        'x-ms-blob-type': 'BlockBlob',
        'Content-Length': str(content_length),
    }

    try:
        response = http.put(blob_url(container_url, object_key), headers=headers, data=payload)
    except Exception as e:
        return UploadOutcome.failed(UploadError(f"Upload request failed: {e}"))

    if response.status_code == 201:
        return UploadOutcome.uploaded()
    if response.status_code == 202:
        return UploadOutcome.accepted()

    body = response.text
    return UploadOutcome.failed(UploadError(
        f"HTTP error {response.status_code} - {body}",
        status_code=response.status_code,
        body=body
    ))

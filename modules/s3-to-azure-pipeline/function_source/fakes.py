"""
In-memory stand-ins for HTTP, parameter storage and S3 used by the tests
"""
import boto3


CONTAINER_URL = 'https://account.blob.core.windows.net/backup'

PARAMETER_NAMES = {
    'container_url': '/svc/containerurl',
    'tenant_id': '/svc/tenantid',
    'client_id': '/svc/clientid',
    'client_secret': 'svc/clientsecret',
}

PARAMETERS = {
    '/svc/containerurl': CONTAINER_URL,
    '/svc/tenantid': 'tenant',
    '/svc/clientid': 'client',
    'svc/clientsecret': 'secret',
}


def s3_record(bucket, key):
    """One S3 notification record, key as S3 would encode it"""
    return {'eventSource': 'aws:s3', 's3': {'bucket': {'name': bucket}, 'object': {'key': key}}}


def aws_client(service):
    return boto3.client(
        service,
        region_name='us-east-1',
        aws_access_key_id='testing',
        aws_secret_access_key='testing'
    )


class FakeResponse:
    def __init__(self, status_code, json_data=None, text='', reason=''):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text
        self.reason = reason

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


class FakeSession:
    """Answers the token POST and every PUT; PUT status can be chosen per blob URL suffix"""

    def __init__(self, token_response=None, put_statuses=None):
        self.token_response = token_response or FakeResponse(200, {'access_token': 'T'})
        self.put_statuses = put_statuses or {}
        self.posts = []
        self.puts = []

    def post(self, url, **kwargs):
        self.posts.append((url, kwargs))
        return self.token_response

    def put(self, url, **kwargs):
        self.puts.append((url, kwargs))
        for suffix, status in self.put_statuses.items():
            if url.endswith(suffix):
                return FakeResponse(status, text='Forbidden' if status == 403 else '')
        return FakeResponse(201)


class DictCredentialProvider:
    """Parameters and secrets from a dict; absent or empty values are None"""

    def __init__(self, values):
        self.values = values

    def get_parameter(self, name):
        return self.values.get(name) or None

    def get_secret(self, secret_id):
        return self.values.get(secret_id) or None


class FakeSourceStore:
    """In-memory source; values may be ObjectPayloads or exceptions to raise"""

    def __init__(self, objects):
        self.objects = objects
        self.requested = []

    def get_object(self, bucket, key):
        self.requested.append((bucket, key))
        value = self.objects[key]
        if isinstance(value, Exception):
            raise value
        return value

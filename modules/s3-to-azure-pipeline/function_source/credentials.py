"""
Configuration and secret lookup for the Azure replication functions.

Providers return None when a value does not exist; resolve_settings turns
any missing value into a ConfigurationError. Nothing is ever defaulted.
"""
import os
from botocore.exceptions import BotoCoreError, ClientError
from shared import ConfigurationError, log_structured


DEFAULT_AUTHORITY_HOST = 'https://login.microsoftonline.com'
DEFAULT_RESOURCE = 'https://storage.azure.com/'

NOT_FOUND_CODES = ('ParameterNotFound', 'ResourceNotFoundException')


def parameter_names_from_env():
    """Names under which the provider stores each setting"""
    return {
        'container_url': os.environ.get('CONTAINER_URL_PARAM', '/s3toazurebackupservice/azureblobcontainerurl'),
        'tenant_id': os.environ.get('TENANT_ID_PARAM', '/s3toazurebackupservice/azuretenantid'),
        'client_id': os.environ.get('CLIENT_ID_PARAM', '/s3toazurebackupservice/azureclientid'),
        'client_secret': os.environ.get('CLIENT_SECRET_ID', 's3toazurebackupservice/azureclientsecret'),
    }


class AWSCredentialProvider:
    """Reads parameters from SSM Parameter Store and secrets from Secrets Manager"""

    def __init__(self, ssm_client, secrets_client):
        self.ssm_client = ssm_client
        self.secrets_client = secrets_client

    def get_parameter(self, name):
        try:
            response = self.ssm_client.get_parameter(Name=name)
        except ClientError as e:
            if e.response['Error']['Code'] in NOT_FOUND_CODES:
                return None
            raise ConfigurationError(f"Unable to read parameter {name}: {e}") from e
        except BotoCoreError as e:
            raise ConfigurationError(f"Unable to read parameter {name}: {e}") from e
        return response.get('Parameter', {}).get('Value')

    def get_secret(self, secret_id):
        try:
            response = self.secrets_client.get_secret_value(SecretId=secret_id)
        except ClientError as e:
            if e.response['Error']['Code'] in NOT_FOUND_CODES:
                return None
            raise ConfigurationError(f"Unable to read secret {secret_id}: {e}") from e
        except BotoCoreError as e:
            raise ConfigurationError(f"Unable to read secret {secret_id}: {e}") from e
        return response.get('SecretString')


class ReplicationSettings:
    """Everything needed to talk to Azure AD and the blob container"""

    def __init__(self, container_url, client_id, client_secret, auth_url, resource):
        self.container_url = container_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.auth_url = auth_url
        self.resource = resource


def resolve_settings(provider, parameter_names):
    """Look up every setting, failing on the first one that is missing"""
    values = {}
    for setting in ('container_url', 'tenant_id', 'client_id'):
        name = parameter_names[setting]
        value = provider.get_parameter(name)
        if not value:
            raise ConfigurationError(f"Parameter {name} is undefined")
        values[setting] = value

    secret_id = parameter_names['client_secret']
    client_secret = provider.get_secret(secret_id)
    if not client_secret:
        raise ConfigurationError(f"Secret {secret_id} is undefined")

    authority_host = os.environ.get('AZURE_AUTHORITY_HOST', DEFAULT_AUTHORITY_HOST).rstrip('/')
    resource = os.environ.get('AZURE_RESOURCE', DEFAULT_RESOURCE)

    log_structured("Azure Blob Container Url resolved", container_url=values['container_url'])

    return ReplicationSettings(
        container_url=values['container_url'],
        client_id=values['client_id'],
        client_secret=client_secret,
        auth_url=f"{authority_host}/{values['tenant_id']}/oauth2/token",
        resource=resource
    )

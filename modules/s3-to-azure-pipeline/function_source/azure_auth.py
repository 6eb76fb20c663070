"""
Azure AD token acquisition via the OAuth2 client-credentials grant
"""
import requests
from shared import AuthError, ConfigurationError, log_structured


def acquire_token(client_id, client_secret, resource, auth_url, session=None):
    """
    Exchange the service principal's id/secret for a bearer token.
    One POST, no retries. Raises ConfigurationError before any network call
    if an input is missing, AuthError for anything the identity provider
    gets wrong.
    """
    if not client_id or not client_secret or not resource or not auth_url:
        raise ConfigurationError("One or more required parameters are undefined")

    http = session or requests
    form = {
        'grant_type': 'client_credentials',
        'client_id': client_id,
        'client_secret': client_secret,
        'resource': resource,
    }

    try:
        response = http.post(auth_url, data=form)
    except requests.RequestException as e:
        log_structured("Error obtaining Azure AD token", severity='ERROR', error=str(e))
        raise AuthError(f"Token request failed: {e}") from e

    if not 200 <= response.status_code < 300:
        log_structured(
            "Error obtaining Azure AD token",
            severity='ERROR',
            status=response.status_code,
            reason=response.reason
        )
        raise AuthError(
            f"HTTP error {response.status_code} - {response.reason}",
            status_code=response.status_code
        )

    try:
        data = response.json()
    except ValueError as e:
        log_structured("Azure AD token response is not JSON", severity='ERROR', error=str(e))
        raise AuthError("Token response is not valid JSON", status_code=response.status_code) from e

    token = data.get('access_token') if isinstance(data, dict) else None
    if not token:
        log_structured("Azure AD token response has no access_token", severity='ERROR')
        raise AuthError("Token response is missing access_token", status_code=response.status_code)

    return token

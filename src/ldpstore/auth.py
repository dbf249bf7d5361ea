from typing import Any, Mapping, Optional

from requests import PreparedRequest
from requests.auth import AuthBase, HTTPBasicAuth
from requests_jwtauth import HTTPBearerAuth, JWTSecretAuth


class ClientCertAuth(AuthBase):
    """Authenticate using a TLS client certificate and key."""
    def __init__(self, cert: str, key: str):
        self.cert = cert
        self.key = key

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        request.cert = (self.cert, self.key)
        return request


def get_authenticator(config: Mapping[str, Any]) -> Optional[AuthBase]:
    """Choose an authentication method from the keys present in `config`.
    In order of precedence:

    1. `AUTH_TOKEN`: a pre-issued bearer token
    2. `JWT_SECRET`: sign a fresh JWT with this secret; the claims can be
       adjusted with `JWT_SUBJECT` and `JWT_ROLE`
    3. `CLIENT_CERT` and `CLIENT_KEY`: TLS client certificate
    4. `USERNAME` and `PASSWORD`: HTTP Basic

    Returns `None` if none of these are configured."""
    if 'AUTH_TOKEN' in config:
        return HTTPBearerAuth(token=config['AUTH_TOKEN'])
    elif 'JWT_SECRET' in config:
        subject = config.get('JWT_SUBJECT', 'ldpstore')
        claims = {'sub': subject, 'iss': 'ldpstore'}
        if 'JWT_ROLE' in config:
            claims['role'] = config['JWT_ROLE']
        return JWTSecretAuth(secret=config['JWT_SECRET'], claims=claims)
    elif 'CLIENT_CERT' in config and 'CLIENT_KEY' in config:
        return ClientCertAuth(cert=config['CLIENT_CERT'], key=config['CLIENT_KEY'])
    elif 'USERNAME' in config and 'PASSWORD' in config:
        return HTTPBasicAuth(username=config['USERNAME'], password=config['PASSWORD'])
    else:
        return None

import datetime
from typing import TYPE_CHECKING

from .credentials import Credentials
from .sigv4 import (
    ALGORITHM,
    SIGNED_HEADERS,
    QueryParams,
    SigningContext,
    SigV4Signer,
    canonical_query_string,
    canonical_request,
    uri_encode,
)

if TYPE_CHECKING:
    from .generator import GeneratorConfig

ACTION = 'connect'
EXPIRES_SECONDS = 900
SERVERLESS_RESOURCE_TYPE = 'ServerlessCache'


def connect_params(config: 'GeneratorConfig') -> QueryParams:
    params = {
        'Action': ACTION,
        'User': config.user_id,
        'X-Amz-Expires': str(EXPIRES_SECONDS),
    }
    # The server rejects serverless tokens without ResourceType and
    # replication group tokens that carry it.
    if config.serverless:
        params['ResourceType'] = SERVERLESS_RESOURCE_TYPE
    return params


def auth_params(signer: SigV4Signer, credentials: Credentials, context: SigningContext) -> QueryParams:
    params = {
        'X-Amz-Algorithm': ALGORITHM,
        'X-Amz-Credential': signer.credential(context),
        'X-Amz-Date': context.amz_date,
        'X-Amz-SignedHeaders': SIGNED_HEADERS,
    }
    if credentials.token:
        params['X-Amz-Security-Token'] = credentials.token
    return params


def assemble_token(
        config: 'GeneratorConfig',
        credentials: Credentials,
        timestamp: datetime.datetime
) -> str:
    """
    Sign a connect request for ``config`` and render it as a token.

    The token is the presigned URL without its scheme:
    ``<resource>/?<canonical query>&X-Amz-Signature=<signature>``.
    """
    context = SigningContext(config.service, config.region, timestamp)
    signer = SigV4Signer(credentials)

    params = connect_params(config)
    params.update(auth_params(signer, credentials, context))

    signature = signer.signature(context, canonical_request(config.resource_name, params))
    query = f'{canonical_query_string(params)}&X-Amz-Signature={uri_encode(signature)}'
    return f'{config.resource_name}/?{query}'

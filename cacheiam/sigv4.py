"""
SigV4 query-string signing for the IAM "connect" request.

Only one request shape is ever signed: ``GET /`` against the cache or cluster
name as the host, no body, ``host`` as the single signed header. Everything
else about the request lives in the query string.
"""

import datetime
import hashlib
import hmac
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Union
from urllib.parse import quote

from .credentials import Credentials
from .errors import SigningError

QueryParams = Dict[str, str]

ALGORITHM = 'AWS4-HMAC-SHA256'
SCOPE_TERMINATOR = 'aws4_request'
SIGNED_HEADERS = 'host'
METHOD = 'GET'
CANONICAL_URI = '/'

# RFC 3986 unreserved characters, alphanumerics are always safe for quote()
_UNRESERVED = '-_.~'


class Service(str, Enum):
    ELASTICACHE = 'elasticache'
    MEMORYDB = 'memorydb'

    @property
    def supports_serverless(self) -> bool:
        return self is Service.ELASTICACHE


def sha256_hex(data: Union[str, bytes]) -> str:
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).hexdigest()


def hmac_sha256(key: bytes, msg: Union[str, bytes]) -> bytes:
    if isinstance(msg, str):
        msg = msg.encode('utf-8')
    return hmac.new(key, msg, hashlib.sha256).digest()


def uri_encode(value: str) -> str:
    return quote(value, safe=_UNRESERVED)


EMPTY_PAYLOAD_HASH = sha256_hex(b'')


def canonical_query_string(params: QueryParams) -> str:
    # Keys are unique, so sorting the encoded pairs sorts by key.
    pairs = sorted((uri_encode(k), uri_encode(v)) for k, v in params.items())
    return '&'.join(f'{k}={v}' for k, v in pairs)


def canonical_request(host: str, params: QueryParams) -> str:
    if not host:
        raise SigningError('cannot build a canonical request without a host')
    return '\n'.join([
        METHOD,
        CANONICAL_URI,
        canonical_query_string(params),
        f'host:{host}\n',
        SIGNED_HEADERS,
        EMPTY_PAYLOAD_HASH,
    ])


@dataclass(frozen=True)
class SigningContext:
    """The service, region and instant a single signature is bound to."""

    service: Service
    region: str
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    def __post_init__(self):
        timestamp = self.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=datetime.timezone.utc)
        timestamp = timestamp.astimezone(datetime.timezone.utc).replace(microsecond=0)
        object.__setattr__(self, 'service', Service(self.service))
        object.__setattr__(self, 'timestamp', timestamp)

    @property
    def date_stamp(self) -> str:
        return self.timestamp.strftime('%Y%m%d')

    @property
    def amz_date(self) -> str:
        return self.timestamp.strftime('%Y%m%dT%H%M%SZ')

    @property
    def credential_scope(self) -> str:
        return '/'.join([self.date_stamp, self.region, self.service.value, SCOPE_TERMINATOR])


class SigV4Signer:
    """
    Computes SigV4 signatures for one set of credentials.

    The signing key is derived again for every signature. Each HMAC stage
    feeds its raw digest into the next; only the final signature is hex.
    """

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    def credential(self, context: SigningContext) -> str:
        return f'{self._credentials.access_key}/{context.credential_scope}'

    def signing_key(self, context: SigningContext) -> bytes:
        k_date = hmac_sha256(f'AWS4{self._credentials.secret_key}'.encode('utf-8'), context.date_stamp)
        k_region = hmac_sha256(k_date, context.region)
        k_service = hmac_sha256(k_region, context.service.value)
        return hmac_sha256(k_service, SCOPE_TERMINATOR)

    def string_to_sign(self, context: SigningContext, request: str) -> str:
        return '\n'.join([
            ALGORITHM,
            context.amz_date,
            context.credential_scope,
            sha256_hex(request),
        ])

    def signature(self, context: SigningContext, request: str) -> str:
        string_to_sign = self.string_to_sign(context, request)
        return hmac.new(self.signing_key(context), string_to_sign.encode('utf-8'), hashlib.sha256).hexdigest()

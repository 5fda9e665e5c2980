"""
IAM authentication token generator for ElastiCache and MemoryDB.

A :class:`TokenGenerator` is built once from a validated
:class:`GeneratorConfig` and then called for a fresh token before every
connection attempt::

    gen = TokenGenerator.for_elasticache('my-user', 'my-cache', 'us-east-1', provider)
    password = gen.token(timeout=5)

Tokens are valid for 15 minutes at the server and are never cached here.
The connection using them must be TLS encrypted.
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from .credentials import BotocoreCredentialProvider, CredentialProvider
from .errors import ConfigurationError, CredentialError
from .sigv4 import Service
from .token import assemble_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratorConfig:
    user_id: str
    resource_name: str
    region: str
    service: Union[Service, str]
    credential_provider: CredentialProvider
    serverless: bool = False

    def __post_init__(self):
        if not self.user_id:
            raise ConfigurationError('user_id must not be empty')
        if not self.resource_name:
            raise ConfigurationError('resource_name must not be empty')
        if not self.region:
            raise ConfigurationError('region must not be empty')
        if self.credential_provider is None or not callable(getattr(self.credential_provider, 'retrieve', None)):
            raise ConfigurationError('a credential provider with a retrieve() method is required')

        try:
            service = Service(self.service)
        except ValueError:
            raise ConfigurationError(f'unsupported service: {self.service!r}') from None
        object.__setattr__(self, 'service', service)

        if self.serverless and not service.supports_serverless:
            raise ConfigurationError(f'serverless is not supported for {_DISPLAY_NAMES[service]}')


_DISPLAY_NAMES = {
    Service.ELASTICACHE: 'ElastiCache',
    Service.MEMORYDB: 'MemoryDB',
}


class TokenGenerator:
    """Generates IAM auth tokens. Safe to share between threads."""

    def __init__(self, config: GeneratorConfig):
        self._config = config

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    @classmethod
    def for_elasticache(
            cls,
            user_id: str,
            cache_name: str,
            region: str,
            credential_provider: CredentialProvider,
            serverless: bool = False
    ) -> 'TokenGenerator':
        """``cache_name`` is the replication group id or serverless cache name."""
        return cls(GeneratorConfig(
            user_id, cache_name, region, Service.ELASTICACHE, credential_provider, serverless
        ))

    @classmethod
    def for_memorydb(
            cls,
            user_id: str,
            cluster_name: str,
            region: str,
            credential_provider: CredentialProvider,
            serverless: bool = False
    ) -> 'TokenGenerator':
        return cls(GeneratorConfig(
            user_id, cluster_name, region, Service.MEMORYDB, credential_provider, serverless
        ))

    @classmethod
    def from_botocore_session(
            cls,
            service: Union[Service, str],
            user_id: str,
            resource_name: str,
            session: Optional[Any] = None,
            region: Optional[str] = None,
            serverless: bool = False
    ) -> 'TokenGenerator':
        """
        Build a generator whose region and credentials come from botocore.

        The region falls back to the session's configured region
        (``AWS_REGION``, ``AWS_DEFAULT_REGION`` or the profile's ``region``).
        Credentials are resolved on every :meth:`token` call, not here.
        """
        provider = BotocoreCredentialProvider(session)
        if region is None:
            region = provider.session.get_config_variable('region')
        return cls(GeneratorConfig(user_id, resource_name, region, service, provider, serverless))

    def token(self, timeout: Optional[float] = None) -> str:
        """
        Return a freshly signed token.

        ``timeout`` bounds credential retrieval, in seconds. A timeout of zero
        or less is treated as an already expired deadline. Signing itself is
        local computation and is not bounded.
        """
        cfg = self._config
        if timeout is not None and timeout <= 0:
            raise CredentialError('deadline expired before credential retrieval') from TimeoutError()

        try:
            credentials = cfg.credential_provider.retrieve(timeout)
        except CredentialError:
            raise
        except Exception as e:
            logger.debug('Credential retrieval failed for %s %s', cfg.service.value, cfg.resource_name, exc_info=True)
            raise CredentialError(f'credential retrieval failed: {e}') from e

        if credentials is None or not credentials.access_key or not credentials.secret_key:
            raise CredentialError('credential provider returned incomplete credentials')

        token = assemble_token(cfg, credentials, datetime.datetime.now(datetime.timezone.utc))
        logger.debug('Generated %s token for %s in %s', cfg.service.value, cfg.resource_name, cfg.region)
        return token

    def __repr__(self):
        cfg = self._config
        return (
            f'{type(self).__name__}(service={cfg.service.value!r}, user_id={cfg.user_id!r}, '
            f'resource_name={cfg.resource_name!r}, region={cfg.region!r}, serverless={cfg.serverless!r})'
        )

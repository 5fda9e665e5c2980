"""
Credentials and the sources they are retrieved from.

A credential provider is anything with a ``retrieve(timeout)`` method that
returns :class:`Credentials`. Two are shipped: a static one, and an adapter
over a botocore session, which covers the environment, shared config files,
assumed roles, web identity and container/instance metadata.
"""

import logging
from concurrent import futures
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from botocore.session import Session

from .errors import CredentialError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    access_key: str
    secret_key: str = field(repr=False)
    token: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        # An empty session token means long-term credentials.
        if not self.token:
            object.__setattr__(self, 'token', None)


class CredentialProvider(Protocol):
    def retrieve(self, timeout: Optional[float] = None) -> Credentials:
        ...


class StaticCredentialProvider:
    def __init__(self, access_key: str, secret_key: str, token: Optional[str] = None):
        self._credentials = Credentials(access_key, secret_key, token)

    def retrieve(self, timeout: Optional[float] = None) -> Credentials:
        return self._credentials


class BotocoreCredentialProvider:
    """
    Resolves credentials through a botocore session.

    botocore's resolver chain has no deadline of its own, so when a timeout
    is given the lookup runs on a small worker pool and the caller waits at
    most that long. A lookup that overruns keeps running in the background
    and its result is discarded.
    """

    def __init__(self, session: Optional[Any] = None, max_workers: int = 4):
        self._session = session if session is not None else Session()
        self._executor = futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix='cacheiam-credentials'
        )

    @property
    def session(self):
        return self._session

    def retrieve(self, timeout: Optional[float] = None) -> Credentials:
        if timeout is None:
            return self._resolve()

        future = self._executor.submit(self._resolve)
        try:
            return future.result(timeout=timeout)
        except futures.TimeoutError:
            future.cancel()
            raise TimeoutError(f'credential retrieval did not finish within {timeout}s') from None

    def _resolve(self) -> Credentials:
        credentials = self._session.get_credentials()
        if credentials is None:
            raise CredentialError('no AWS credentials found by the botocore session')
        # Refreshable credentials refresh themselves here when close to expiry.
        frozen = credentials.get_frozen_credentials()
        logger.debug('Resolved credentials via botocore method %r', getattr(credentials, 'method', None))
        return Credentials(frozen.access_key, frozen.secret_key, frozen.token)

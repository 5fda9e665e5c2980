"""
IAM Authentication Tokens for ElastiCache and MemoryDB

This package generates SigV4 presigned IAM authentication tokens that are
passed as the AUTH password to Redis/Valkey-compatible clients. Signing is a
standalone implementation; botocore is only used to resolve credentials.
"""

import logging

from .credentials import BotocoreCredentialProvider, CredentialProvider, Credentials, StaticCredentialProvider
from .errors import CacheIAMError, ConfigurationError, CredentialError, SigningError
from .generator import GeneratorConfig, TokenGenerator
from .sigv4 import Service

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "TokenGenerator",
    "GeneratorConfig",
    "Service",
    "Credentials",
    "CredentialProvider",
    "StaticCredentialProvider",
    "BotocoreCredentialProvider",
    "CacheIAMError",
    "ConfigurationError",
    "CredentialError",
    "SigningError",
]

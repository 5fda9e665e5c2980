class CacheIAMError(Exception):
    """Base class for every error raised by cacheiam."""


class ConfigurationError(CacheIAMError, ValueError):
    """A token generator was constructed with invalid settings."""


class CredentialError(CacheIAMError):
    """Credentials could not be retrieved, or retrieval timed out."""


class SigningError(CacheIAMError):
    """Malformed input reached the signer; indicates a bug."""

"""Exception classes for slip resolution."""

from typing import Optional


class SlipFindError(Exception):
    """Base exception for all slippy-find errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class RepositoryNotFoundError(SlipFindError):
    """Raised when the path is not a git repository or HEAD cannot be resolved."""

    def __init__(self, path: str, details: Optional[str] = None):
        super().__init__(f"git repository not found at {path}", details)
        self.path = path


class NoRemoteOriginError(SlipFindError):
    """Raised when no usable 'origin' remote is configured."""

    def __init__(self, details: Optional[str] = None):
        super().__init__(
            "no 'origin' remote configured; cannot determine repository name",
            details,
        )


class InvalidRemoteURLError(SlipFindError):
    """Raised when the origin URL cannot be parsed into owner/name."""

    def __init__(self, url: str):
        super().__init__(
            "could not parse repository name from remote URL",
            f"unrecognized URL format: {url}",
        )
        self.url = url


class EmptyAncestryError(SlipFindError):
    """Raised when the ancestry walk produced no commits."""

    def __init__(self):
        super().__init__("commit ancestry is empty")


class ResolutionCancelledError(SlipFindError):
    """Raised when the caller cancelled an in-flight resolution."""

    pass


class GitCommandError(SlipFindError):
    """Raised when a git subprocess fails or times out."""

    pass


class NoAncestorSlipError(SlipFindError):
    """Raised when the store has no slip for any commit in the ancestry."""

    def __init__(self, commits_searched: int, head_commit: str):
        super().__init__(
            "no slip found in commit ancestry",
            f"searched {commits_searched} commits from {head_commit}",
        )
        self.commits_searched = commits_searched
        self.head_commit = head_commit


class StoreQueryError(SlipFindError):
    """Raised when the slip store query fails."""

    pass


class ConfigurationError(SlipFindError):
    """Base exception for configuration loading errors."""

    pass


class PipelineConfigRequiredError(ConfigurationError):
    """Raised when neither a Vault locator nor a local file is configured."""

    def __init__(self):
        super().__init__(
            "pipeline configuration required: set VAULT_PIPELINE_CONFIG_PATH "
            "(with VAULT_ADDRESS, VAULT_ROLE_ID, VAULT_SECRET_ID) "
            "or SLIPPY_PIPELINE_CONFIG for local file"
        )


class PipelineConfigNotFoundError(ConfigurationError):
    """Raised when the pipeline configuration file does not exist."""

    def __init__(self, path: str):
        super().__init__("pipeline configuration file not found", path)
        self.path = path


class PipelineConfigReadError(ConfigurationError):
    """Raised when the pipeline configuration file exists but cannot be read."""

    pass


class PipelineConfigInvalidError(ConfigurationError):
    """Raised when the pipeline configuration does not parse or validate."""

    def __init__(self, details: Optional[str] = None):
        super().__init__("pipeline configuration is not valid JSON", details)


class SecretSourceUnavailableError(ConfigurationError):
    """Raised when the Vault client cannot be created or authenticated."""

    pass


class SecretNotFoundError(ConfigurationError):
    """Raised when the pipeline secret cannot be read from Vault."""

    def __init__(self, path: str, details: Optional[str] = None):
        super().__init__(
            f"pipeline configuration not found in Vault at path {path}", details
        )
        self.path = path

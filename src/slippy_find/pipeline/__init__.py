"""Pipeline definition loading."""

from .models import PipelineConfig, PipelineStep
from .resolver import PipelineConfigResolver
from .sources import (
    FilePipelineSource,
    PipelineSource,
    SecretLocator,
    VaultPipelineSource,
    parse_secret_locator,
)

__all__ = [
    "FilePipelineSource",
    "PipelineConfig",
    "PipelineConfigResolver",
    "PipelineSource",
    "PipelineStep",
    "SecretLocator",
    "VaultPipelineSource",
    "parse_secret_locator",
]

"""Pipeline definition resolution with source precedence."""

import logging
from typing import Sequence

from ..exceptions import PipelineConfigRequiredError
from .models import PipelineConfig
from .sources import PipelineSource

logger = logging.getLogger(__name__)


class PipelineConfigResolver:
    """Evaluates pipeline sources in order and returns the first definition.

    Only an unconfigured source falls through to the next one. A configured
    source that fails stops resolution with its error, so a broken Vault
    setup is never silently replaced by a stale local file.
    """

    def __init__(self, sources: Sequence[PipelineSource]):
        self.sources = list(sources)

    def resolve(self) -> PipelineConfig:
        """
        Returns:
            The pipeline definition from the first configured source

        Raises:
            PipelineConfigRequiredError: If no source is configured
            ConfigurationError: If the first configured source fails
        """
        for source in self.sources:
            config = source.load()
            if config is None:
                logger.debug(f"Pipeline source not configured: {source.description}")
                continue
            logger.info(
                f"Loaded pipeline config '{config.name}' "
                f"({len(config.steps)} steps) from {source.description}"
            )
            return config

        raise PipelineConfigRequiredError()

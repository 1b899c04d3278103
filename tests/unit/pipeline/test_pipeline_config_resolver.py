"""Tests for pipeline configuration source precedence."""

from typing import Optional

import pytest

from slippy_find.exceptions import (
    PipelineConfigRequiredError,
    SecretNotFoundError,
)
from slippy_find.pipeline.models import PipelineConfig, PipelineStep
from slippy_find.pipeline.resolver import PipelineConfigResolver
from slippy_find.pipeline.sources import PipelineSource


class StaticSource(PipelineSource):
    def __init__(
        self,
        description: str,
        config: Optional[PipelineConfig] = None,
        error: Optional[Exception] = None,
    ):
        self.description = description
        self.config = config
        self.error = error
        self.loaded = False

    def load(self) -> Optional[PipelineConfig]:
        self.loaded = True
        if self.error is not None:
            raise self.error
        return self.config


def pipeline(name: str) -> PipelineConfig:
    return PipelineConfig(name=name, steps=[PipelineStep(name="build")])


def test_first_configured_source_wins():
    vault = StaticSource("Vault secret", pipeline("from-vault"))
    local = StaticSource("local file", pipeline("from-file"))

    config = PipelineConfigResolver([vault, local]).resolve()

    assert config.name == "from-vault"
    assert local.loaded is False


def test_unconfigured_source_falls_through():
    vault = StaticSource("Vault secret")
    local = StaticSource("local file", pipeline("from-file"))

    config = PipelineConfigResolver([vault, local]).resolve()

    assert config.name == "from-file"


def test_failing_source_does_not_fall_through():
    vault = StaticSource("Vault secret", error=SecretNotFoundError("ci/app"))
    local = StaticSource("local file", pipeline("from-file"))

    with pytest.raises(SecretNotFoundError):
        PipelineConfigResolver([vault, local]).resolve()

    assert local.loaded is False


def test_nothing_configured_names_both_options():
    resolver = PipelineConfigResolver(
        [StaticSource("Vault secret"), StaticSource("local file")]
    )

    with pytest.raises(PipelineConfigRequiredError) as exc_info:
        resolver.resolve()

    message = str(exc_info.value)
    assert "VAULT_PIPELINE_CONFIG_PATH" in message
    assert "SLIPPY_PIPELINE_CONFIG" in message

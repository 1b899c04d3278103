"""Pipeline definition models.

The definition is owned by the slip store; slippy-find only parses it,
checks its structure and hands it to the store unchanged. Unknown fields
are kept so nothing the store relies on is dropped.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PipelineStep(BaseModel):
    """A single named step of a pipeline."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Unique step name")
    description: str = Field(default="", description="Human readable description")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank step names."""
        if not v.strip():
            raise ValueError("Step name must not be empty")
        return v


class PipelineConfig(BaseModel):
    """Pipeline definition: version tag, name and ordered steps."""

    model_config = ConfigDict(extra="allow")

    version: str = Field(default="", description="Pipeline definition version")
    name: str = Field(description="Pipeline name")
    steps: List[PipelineStep] = Field(description="Ordered pipeline steps")

    @field_validator("steps")
    @classmethod
    def validate_unique_steps(cls, v: List[PipelineStep]) -> List[PipelineStep]:
        """Step names identify slip columns, so they must be unique."""
        seen = set()
        for step in v:
            if step.name in seen:
                raise ValueError(f"Duplicate step name: {step.name}")
            seen.add(step.name)
        return v

"""Base Pydantic models for DSL elements.

This module defines the foundational model classes used by the execution
tree and by runtime settings. Tree nodes are immutable after construction
and reject unknown fields to avoid silent errors caused by typos.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all DSL elements.

    This class serves as the root for all Pydantic models representing
    DSL constructs such as suites, tests, and hooks.

    Design principles enforced by this model:
        - Immutability: attributes can not be reassigned after creation.
          Suites still grow their children lists while their describe
          body runs, which is the only sanctioned mutation.
        - Strict schema validation: unknown or extra fields are rejected.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    This class serves as the root for all settings models responsible for
    resolving runtime configuration (for example, environment variables,
    CI-provided values, or local overrides).

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking configuration resolution.
    """

    model_config =  SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )

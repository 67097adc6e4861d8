"""Shared pydantic base and the request entity."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Immutable value object serialized with camelCase keys.

    snake_case field names are accepted on input as well.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PipelineRequest(CamelModel):
    """A source video URL submitted by a client."""

    source_url: str
    display_title: str | None = None

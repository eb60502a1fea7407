"""Pydantic models describing an exported pack dataset."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class InvalidDatasetError(ValueError):
    """Raised when a payload lacks the pack descriptor or the document list."""


class DatasetBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PackDescriptor(DatasetBaseModel):
    collection: str = Field(min_length=1)
    type: str | None = None
    system: str | None = None
    label: str | None = None


class DatasetPayload(DatasetBaseModel):
    pack: PackDescriptor
    documents: list[dict[str, Any]]


def parse_dataset(dataset: str, payload: object) -> DatasetPayload:
    """Validate the top-level shape of a decoded dataset."""

    try:
        return DatasetPayload.model_validate(payload)
    except ValidationError as exc:
        raise InvalidDatasetError(f"Invalid dataset {dataset}: {exc}") from exc

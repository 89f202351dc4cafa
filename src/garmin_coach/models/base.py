"""Shared pydantic base for models exchanged as camelCase JSON."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Frozen model that reads and writes camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict:  # type: ignore[type-arg]
        """Dump using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True)

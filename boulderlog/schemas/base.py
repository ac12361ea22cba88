"""Shared Pydantic base for boundary schemas.

Fields are snake_case in Python and camelCase on the wire, so reports can be
handed straight to a JSON response with ``model_dump(by_alias=True)``.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_response(self) -> dict:
        """Dump with wire (camelCase) keys."""
        return self.model_dump(by_alias=True, mode="json")

"""Shared Pydantic configuration for record schemas."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RecordSchema(BaseModel):
    """
    Base schema for stored records.

    - alias_generator: snake_case fields serialize as camelCase (created_by → createdBy)
    - populate_by_name: accepts snake_case too, so storage code can build records directly
    - from_attributes: SQLAlchemy rows validate straight into schemas
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

"""Base schemas for common patterns."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python, readable from ORM rows."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


def reject_null(value):
    """Field validator body for optional update fields backed by NOT NULL columns."""
    if value is None:
        raise ValueError("may be omitted but cannot be null")
    return value

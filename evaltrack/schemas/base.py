"""
Base schema classes.

The wire format is camelCase (``employeeId``, ``isRead``) while Python code
uses snake_case; the alias generator bridges the two. Input is accepted in
either form.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ResponseSchema(CamelModel):
    """Read from ORM objects"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestSchema(CamelModel):
    """Create/update payloads; unknown keys are ignored"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def blank_to_none(value):
    """The UI sends "" or "--NONE--" to mean no selection."""
    if value in ("", "--NONE--"):
        return None
    return value

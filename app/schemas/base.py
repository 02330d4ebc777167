"""Common schema base: snake_case in Python, camelCase on the wire."""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Accepts both spellings on input; responses are serialized by alias (camelCase)."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class MessageResponse(APIModel):
    message: str

# src/schemas.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base schema: accepts snake_case or camelCase, responds in camelCase."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class SuccessResponse(ApiModel):
    success: bool = True

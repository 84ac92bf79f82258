"""
Shared schema base.

Clients of this service speak camelCase JSON; Python code uses
snake_case field names.

Dependencies: pydantic
System role: Base class for API contracts
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """BaseModel that reads and writes camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

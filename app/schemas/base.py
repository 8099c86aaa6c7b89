"""
Shared Schema Building Blocks

- ApiSchema: base for every request/response body. Fields are declared in
  snake_case and exchanged as camelCase on the wire (reviewText, createdAt).
- ObjectIdStr: renders a MongoDB ObjectId as its 24-hex string.
"""

from typing import Annotated, Any

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def _object_id_to_str(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


ObjectIdStr = Annotated[str, BeforeValidator(_object_id_to_str)]


class ApiSchema(BaseModel):
    """Base schema: camelCase aliases, snake_case names accepted as input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

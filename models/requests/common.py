"""
Common request model base.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """Request body accepting camelCase (as sent by the web app) or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

"""Base schema configuration for all Pydantic models.

Usage:
    - APIRequest: incoming request bodies from the browser client (camelCase)
    - APIResponse: outgoing response bodies (camelCase)
    - DownstreamResponse: payloads received from the Kroger and Spoonacular APIs
    - RowSchema: profile and saved-recipe rows, which keep their snake_case
      column names on the wire
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # Accept both snake_case and camelCase
        use_enum_values=True,
        validate_default=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming API request schemas.

    Configured to ignore extra fields - the browser client may send
    additional properties that we don't recognize, and that's okay.
    """

    model_config = ConfigDict(
        extra="ignore",
    )


class APIResponse(_BaseSchema):
    """Base class for outgoing API response schemas.

    Configured to forbid extra fields - we should only return
    properties that are explicitly defined in the schema.
    """

    model_config = ConfigDict(
        extra="forbid",
    )


class DownstreamResponse(_BaseSchema):
    """Base class for responses received from external services.

    Configured to ignore extra fields - upstream services may add
    new properties, and we don't want that to break our parsing.
    """

    model_config = ConfigDict(
        extra="ignore",
    )


class RowSchema(BaseModel):
    """Base class for relational rows and the bodies that write them.

    Column names are snake_case and are used as-is on the wire.
    """

    model_config = ConfigDict(
        extra="ignore",
    )

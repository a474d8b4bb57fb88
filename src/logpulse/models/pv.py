"""
PV classification API models.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PageViewRecord(BaseModel):
    """One parsed log record."""

    status_code: int = Field(description="HTTP status code")
    path: str = Field(default="", description="Request path")
    ip: str = Field(default="", description="Raw client address token")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClassifyRequest(BaseModel):
    records: List[PageViewRecord] = Field(
        min_length=1,
        max_length=1000,
        description="Records to classify (1-1000)",
    )


class ClassifyResponse(BaseModel):
    """Per-record decisions in request order."""

    results: List[bool] = Field(description="True when the record counts as a page view")
    accepted: int = Field(description="Number of page views")
    rejected: int = Field(description="Number of filtered records")

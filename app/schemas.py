"""
Wire shapes for the recommendation proxy.

These models document the contract in the OpenAPI schema. The endpoint
itself relays the upstream payload untouched, so unknown fields are kept.
"""

from pydantic import BaseModel, ConfigDict


class Download(BaseModel):
    title: str
    url: str
    language: str


class Recommendation(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    description: str | None = None
    test_types: str | None = None
    remote_testing: str | None = None
    duration: str | None = None
    job_levels: str | None = None
    adaptive_irt: str | None = None
    languages: str | None = None
    url: str | None = None
    downloads: list[Download] | None = None


class RecommendRequest(BaseModel):
    query: str


class RecommendResponse(BaseModel):
    results: list[Recommendation]


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None

# src/forum_desk/schemas/parameter.py
"""Grading parameter Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from forum_desk.domain.entities import ParameterCategory


class ParameterCategorySchema(BaseModel):
    """One weighted grading category."""

    category_name: str | None = None
    weight: float = 0.0

    model_config = ConfigDict(from_attributes=True)

    def to_domain(self) -> ParameterCategory:
        return ParameterCategory(self.category_name, self.weight)


class ParameterCreate(BaseModel):
    """Schema for creating or replacing a grading parameter."""

    name: str | None = None
    description: str | None = None
    is_active: bool = True
    required_posts: int = 0
    required_replies: int = 0
    topics: list[str] = Field(default_factory=list)
    thread_id: str | None = None
    categories: list[ParameterCategorySchema] = Field(default_factory=list)

    def domain_categories(self) -> list[ParameterCategory]:
        return [category.to_domain() for category in self.categories]


class ParameterSelection(BaseModel):
    """Schema naming several parameters for bulk deletion."""

    parameter_ids: list[str] = Field(..., min_length=1)


class ParameterResponse(BaseModel):
    """Schema for grading parameter information returned by the API."""

    parameter_id: str
    name: str
    description: str
    is_active: bool
    created_by_username: str
    required_posts: int
    required_replies: int
    topics: list[str]
    thread_id: str | None
    categories: list[ParameterCategorySchema]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

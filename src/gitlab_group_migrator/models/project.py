"""Project entity models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Project(BaseModel):
    """GitLab project as returned by the API."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    id: int = Field(..., description='Project ID')
    name: str = Field(..., description='Project name')
    path: str = Field(..., description='Project path segment')
    path_with_namespace: str = Field(..., description='Full project path')
    visibility: str = Field(
        default='private',
        description='Project visibility (private, internal, public)',
    )
    description: Optional[str] = Field(default='', description='Project description')

    @field_validator('description', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        """GitLab reports a missing description as null."""
        return '' if v is None else v


class ProjectCreate(BaseModel):
    """Payload for creating a project by server-side import."""

    name: str = Field(..., description='Project name')
    path: str = Field(..., description='Project path')
    namespace_id: int = Field(..., description='Target namespace ID')
    import_url: str = Field(
        ..., description='Credentialed clone URL to import from', repr=False
    )
    description: str = Field(default='', description='Project description')
    visibility: str = Field(default='private', description='Project visibility')

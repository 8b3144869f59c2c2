"""Group entity models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Group(BaseModel):
    """GitLab group (namespace) as returned by the API."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    id: int = Field(..., description='Group ID')
    name: str = Field(..., description='Group name')
    path: str = Field(..., description='Group path segment')
    full_path: str = Field(..., description='Full group path with parents')
    visibility: str = Field(
        default='private', description='Group visibility (private, internal, public)'
    )
    parent_id: Optional[int] = Field(default=None, description='Parent group ID')


class GroupCreate(BaseModel):
    """Payload for creating a subgroup on the target instance."""

    name: str = Field(..., description='Group name')
    path: str = Field(..., description='Group path')
    parent_id: int = Field(..., description='Parent group ID')
    visibility: str = Field(default='private', description='Group visibility')

    @classmethod
    def from_source(cls, group: Group, parent_id: int) -> 'GroupCreate':
        """Copy name, path and visibility of a source group."""
        return cls(
            name=group.name,
            path=group.path,
            parent_id=parent_id,
            visibility=group.visibility,
        )

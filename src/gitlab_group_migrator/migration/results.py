"""Migration result and summary models."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class MigrationStatus(str, Enum):
    """Migration status enumeration."""

    COMPLETED = 'completed'
    SKIPPED = 'skipped'
    FAILED = 'failed'


class MigrationResult(BaseModel):
    """Outcome of migrating one group or project."""

    entity_type: str = Field(..., description='Type of entity migrated')
    source_path: str = Field(..., description='Full path on the source instance')
    target_path: str = Field(..., description='Full path on the target instance')
    status: MigrationStatus = Field(..., description='Migration status')
    finished_at: datetime = Field(
        default_factory=datetime.now, description='When the outcome was recorded'
    )

    error_message: Optional[str] = Field(
        default=None, description='Error message if failed'
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description='Additional metadata'
    )

    @property
    def success(self) -> bool:
        return self.status != MigrationStatus.FAILED


class MigrationSummary(BaseModel):
    """Summary of migration results."""

    started_at: datetime = Field(..., description='Migration start time')
    completed_at: Optional[datetime] = Field(
        default=None, description='Migration completion time'
    )
    results: List[MigrationResult] = Field(
        default_factory=list, description='All migration results'
    )

    @property
    def results_by_type(self) -> Dict[str, Dict[str, int]]:
        """Counts per entity type: total, successful, failed, skipped."""
        counts: Dict[str, Dict[str, int]] = {}
        for result in self.results:
            bucket = counts.setdefault(
                result.entity_type,
                {'total': 0, 'successful': 0, 'failed': 0, 'skipped': 0},
            )
            bucket['total'] += 1
            if result.status == MigrationStatus.COMPLETED:
                bucket['successful'] += 1
            elif result.status == MigrationStatus.SKIPPED:
                bucket['skipped'] += 1
            else:
                bucket['failed'] += 1
        return counts

    @property
    def failed(self) -> List[MigrationResult]:
        return [r for r in self.results if r.status == MigrationStatus.FAILED]

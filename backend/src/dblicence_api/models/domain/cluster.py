"""Cluster domain model."""

from pydantic import BaseModel, Field


class Cluster(BaseModel):
    """Named group of hosts sharing a licence pool."""

    name: str
    cpu: float = Field(default=0.0, ge=0)  # Aggregate capacity, 0 when not exposed
    hostnames: list[str] = Field(default_factory=list)

    class Config:
        """Pydantic config."""

        from_attributes = True
        frozen = True

    @property
    def key(self) -> str:
        """Aggregation key for consumption grouped by this cluster."""
        return f"cluster_{self.name}"

    @property
    def exposes_capacity(self) -> bool:
        """Check whether the aggregate capacity figure is known."""
        return self.cpu > 0

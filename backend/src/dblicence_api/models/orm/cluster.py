"""Cluster ORM models."""

from uuid import UUID

from sqlalchemy import Float, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dblicence_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class ClusterORM(Base, UUIDMixin, TimestampMixin):
    """Virtualization cluster database model."""

    __tablename__ = "clusters"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    cpu: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    members: Mapped[list["ClusterMemberORM"]] = relationship(
        "ClusterMemberORM", back_populates="cluster", lazy="select", cascade="all, delete-orphan"
    )


class ClusterMemberORM(Base, UUIDMixin):
    """Host (virtual machine) running on a cluster."""

    __tablename__ = "cluster_members"

    cluster_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("clusters.id", ondelete="CASCADE"), nullable=False
    )
    hostname: Mapped[str] = mapped_column(String(255), nullable=False)

    cluster: Mapped["ClusterORM"] = relationship("ClusterORM", back_populates="members")

    __table_args__ = (
        UniqueConstraint("cluster_id", "hostname", name="uq_cluster_member_hostname"),
        Index("idx_cluster_members_hostname", "hostname"),
    )

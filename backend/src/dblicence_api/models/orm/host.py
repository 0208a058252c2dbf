"""Host, database and database licence ORM models."""

from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dblicence_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class HostORM(Base, UUIDMixin, TimestampMixin):
    """Host snapshot database model.

    A new snapshot for the same hostname archives the previous one, so the
    current inventory is every row with archived = false.
    """

    __tablename__ = "hosts"

    hostname: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    environment: Mapped[str | None] = mapped_column(String(100), nullable=True)
    cpu_model: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    cpu_sockets: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cpu_cores: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cpu_threads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cores_per_socket: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cluster_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    databases: Mapped[list["DatabaseORM"]] = relationship(
        "DatabaseORM", back_populates="host", lazy="select", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_hosts_hostname_archived", "hostname", "archived"),
        Index("idx_hosts_location", "location"),
        Index("idx_hosts_created_at", "created_at"),
    )


class DatabaseORM(Base, UUIDMixin):
    """Database instance database model."""

    __tablename__ = "databases"

    host_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("hosts.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    db_id: Mapped[str] = mapped_column(String(64), nullable=False)
    technology: Mapped[str] = mapped_column(String(20), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)

    host: Mapped["HostORM"] = relationship("HostORM", back_populates="databases")
    licenses: Mapped[list["DatabaseLicenseORM"]] = relationship(
        "DatabaseLicenseORM", back_populates="database", lazy="select", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_databases_host", "host_id"),
        Index("idx_databases_role_status", "technology", "role", "status"),
        Index("idx_databases_correlation", "db_id", "name"),
    )


class DatabaseLicenseORM(Base, UUIDMixin):
    """Licence entry of a database."""

    __tablename__ = "database_licenses"

    database_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("databases.id", ondelete="CASCADE"), nullable=False
    )
    license_type_id: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    count: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    ignored: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ignored_comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    database: Mapped["DatabaseORM"] = relationship("DatabaseORM", back_populates="licenses")

    __table_args__ = (
        UniqueConstraint("database_id", "license_type_id", name="uq_database_license_type"),
        Index("idx_database_licenses_type", "license_type_id"),
    )

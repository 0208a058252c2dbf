"""Licence type catalogue ORM models."""

from sqlalchemy import Float, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dblicence_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class LicenseTypeORM(Base, TimestampMixin):
    """Licence type (contract part) database model, keyed by part identifier."""

    __tablename__ = "license_types"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    item_description: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    metric: Mapped[str] = mapped_column(String(50), nullable=False)
    technology: Mapped[str] = mapped_column(String(20), nullable=False)
    aliases: Mapped[list[str]] = mapped_column(ARRAY(String(255)), default=list, nullable=False)
    default_core_factor: Mapped[float | None] = mapped_column(Float, nullable=True)

    core_factors: Mapped[list["CoreFactorORM"]] = relationship(
        "CoreFactorORM",
        back_populates="license_type",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="CoreFactorORM.position",
    )

    __table_args__ = (Index("idx_license_types_technology", "technology"),)


class CoreFactorORM(Base, UUIDMixin):
    """Core factor row of a licence type, matched against CPU models in position order."""

    __tablename__ = "core_factors"

    license_type_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("license_types.id", ondelete="CASCADE"), nullable=False
    )
    processor_pattern: Mapped[str] = mapped_column(String(255), nullable=False)
    factor: Mapped[float] = mapped_column(Float, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    license_type: Mapped["LicenseTypeORM"] = relationship(
        "LicenseTypeORM", back_populates="core_factors"
    )

    __table_args__ = (Index("idx_core_factors_license_type", "license_type_id"),)

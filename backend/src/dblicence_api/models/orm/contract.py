"""Contract ORM models."""

from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, Float, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dblicence_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class ContractORM(Base, UUIDMixin, TimestampMixin):
    """Contract database model for one licence part."""

    __tablename__ = "contracts"

    contract_id: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    csi: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    license_type_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("license_types.id", ondelete="RESTRICT"), nullable=False
    )
    technology: Mapped[str] = mapped_column(String(20), nullable=False)
    unlimited: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    basket: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    restricted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    licenses_count: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    hosts: Mapped[list["ContractHostORM"]] = relationship(
        "ContractHostORM", back_populates="contract", lazy="selectin", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_contracts_technology", "technology"),
        Index("idx_contracts_license_type", "license_type_id"),
        CheckConstraint("NOT unlimited OR basket", name="ck_contracts_unlimited_basket"),
    )


class ContractHostORM(Base, UUIDMixin):
    """Host explicitly associated with a contract."""

    __tablename__ = "contract_hosts"

    contract_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False
    )
    hostname: Mapped[str] = mapped_column(String(255), nullable=False)

    contract: Mapped["ContractORM"] = relationship("ContractORM", back_populates="hosts")

    __table_args__ = (
        UniqueConstraint("contract_id", "hostname", name="uq_contract_host"),
        Index("idx_contract_hosts_hostname", "hostname"),
    )

"""Host and database domain models."""

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class Technology(StrEnum):
    """Database technology whose licences are tracked."""

    ORACLE = "oracle"
    MYSQL = "mysql"
    SQLSERVER = "sqlserver"


class DatabaseRole(StrEnum):
    """Replication role of a database."""

    PRIMARY = "primary"
    STANDBY = "standby"  # Physical/logical standby, secondary replica
    OTHER = "other"


class DatabaseStatus(StrEnum):
    """Open status of a database instance."""

    OPEN = "open"
    MOUNTED = "mounted"
    OTHER = "other"


# Technology specific attributes. Each variant documents the keys collected
# by the agent for that engine; unknown keys are rejected.


class OracleDatabaseDetails(BaseModel):
    """Oracle Database specific attributes."""

    technology: Literal["oracle"] = "oracle"
    edition: str | None = None  # EE, SE2, XE
    version: str | None = None
    is_cdb: bool = False
    rac: bool = False
    dataguard: bool = False

    class Config:
        """Pydantic config."""

        extra = "forbid"
        frozen = True


class MySQLDatabaseDetails(BaseModel):
    """MySQL specific attributes."""

    technology: Literal["mysql"] = "mysql"
    edition: str | None = None  # COMMUNITY, ENTERPRISE
    version: str | None = None
    platform: str | None = None

    class Config:
        """Pydantic config."""

        extra = "forbid"
        frozen = True


class SQLServerDatabaseDetails(BaseModel):
    """Microsoft SQL Server specific attributes."""

    technology: Literal["sqlserver"] = "sqlserver"
    edition: str | None = None  # ENT, STD, DEV, EXP
    version: str | None = None
    always_on: bool = False

    class Config:
        """Pydantic config."""

        extra = "forbid"
        frozen = True


TechnologyDetails = Annotated[
    OracleDatabaseDetails | MySQLDatabaseDetails | SQLServerDatabaseDetails,
    Field(discriminator="technology"),
]


class DatabaseLicense(BaseModel):
    """Licence consumed by a database for one contract part."""

    license_type_id: str
    name: str = ""
    count: float = Field(default=0.0, ge=0)
    ignored: bool = False
    ignored_comment: str | None = None
    propagated: bool = False  # Copied from the primary database

    class Config:
        """Pydantic config."""

        from_attributes = True
        frozen = True

    @property
    def in_use(self) -> bool:
        """Check whether this entry consumes units."""
        return not self.ignored and self.count > 0


class Database(BaseModel):
    """Database instance hosted on a host at snapshot time."""

    name: str
    db_id: str  # Engine-assigned identifier (DBID for Oracle)
    technology: Technology
    role: DatabaseRole = DatabaseRole.PRIMARY
    status: DatabaseStatus = DatabaseStatus.OPEN
    licenses: list[DatabaseLicense] = Field(default_factory=list)
    details: TechnologyDetails | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True
        frozen = True

    @property
    def is_primary_open(self) -> bool:
        """Check whether this database is an open primary."""
        return self.role == DatabaseRole.PRIMARY and self.status == DatabaseStatus.OPEN

    @property
    def needs_primary_licenses(self) -> bool:
        """Check whether this database inherits licences from a primary."""
        return self.role != DatabaseRole.PRIMARY and self.status in (
            DatabaseStatus.OPEN,
            DatabaseStatus.MOUNTED,
        )

    def license(self, license_type_id: str) -> DatabaseLicense | None:
        """Get the licence entry for a contract part."""
        for entry in self.licenses:
            if entry.license_type_id == license_type_id:
                return entry
        return None


class Host(BaseModel):
    """Host snapshot with its CPU attributes and hosted databases."""

    hostname: str
    location: str | None = None
    environment: str | None = None
    cpu_model: str = ""
    cpu_sockets: int = Field(default=0, ge=0)
    cpu_cores: int = Field(default=0, ge=0)
    cpu_threads: int = Field(default=0, ge=0)
    cores_per_socket: int = Field(default=0, ge=0)
    cluster_name: str | None = None
    archived: bool = False
    databases: list[Database] = Field(default_factory=list)
    created_at: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True
        frozen = True


class PrimaryDatabase(BaseModel):
    """Open primary database together with the host that runs it."""

    hostname: str
    database: Database

    class Config:
        """Pydantic config."""

        frozen = True

    @property
    def key(self) -> tuple[str, str]:
        """Correlation key shared by a primary and its standbys."""
        return (self.database.db_id, self.database.name)

"""Profile data model shared by the store, codec and session modules."""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

_FLAG_OPTIONS = ("auto_to_lower", "enable_ilike")


class EngineType(str, Enum):
    """Database engines a profile can target; values are written to disk verbatim."""

    POSTGRESQL = "PostgreSQL"
    MYSQL = "MySql"
    SQLSERVER = "SqlServer"
    ORACLE = "Oracle"
    SQLITE = "Sqlite"
    MONGODB = "MongoDb"
    CLICKHOUSE = "ClickHouse"
    TIDB = "Tidb"
    OCEANBASE = "OceanBase"
    OCEANBASE_FOR_ORACLE = "OceanBaseForOracle"
    DM = "Dm"
    KDBNDP = "Kdbndp"
    GAUSSDB_NATIVE = "GaussDBNative"
    OPENGAUSS = "OpenGauss"
    POLARDB = "PolarDB"
    VASTBASE = "Vastbase"
    HG = "HG"
    GOLDENDB = "GoldenDB"
    GBASE = "GBase"
    DORIS = "Doris"
    TDENGINE = "TDengine"
    DUCKDB = "DuckDB"
    QUESTDB = "QuestDB"
    OSCAR = "Oscar"


class ProfileSettings(BaseModel):
    """Optional engine-tuning options attached to a profile."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    __pydantic_extra__: dict[str, str] = Field(init=False)

    auto_to_lower: str | None = Field(default=None, alias="autoToLower")
    enable_ilike: str | None = Field(default=None, alias="enableILike")
    identity_strategy: str | None = Field(default=None, alias="identityStrategy")

    def normalized(self) -> ProfileSettings:
        """Canonicalise boolean-like flags and drop a blank identity strategy."""

        updates: dict[str, str | None] = {}
        for option in _FLAG_OPTIONS:
            value = getattr(self, option)
            if value is not None:
                updates[option] = _normalize_flag(value)
        if self.identity_strategy is not None:
            updates["identity_strategy"] = self.identity_strategy.strip() or None
        return self.model_copy(update=updates)


class Profile(BaseModel):
    """One named connection entry of the configuration file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    connection_string: str = Field(alias="connectionString")
    engine_type: EngineType = Field(
        validation_alias=AliasChoices("engineType", "dbType", "engine_type"),
        serialization_alias="engineType",
    )
    description: str | None = None
    is_default: bool | None = Field(default=None, alias="isDefault")
    settings: ProfileSettings | None = Field(
        default=None,
        validation_alias=AliasChoices("settings", "optimizationSettings"),
        serialization_alias="settings",
    )

    def normalized(self) -> Profile:
        """Return a copy with surrounding whitespace trimmed from text fields."""

        description = self.description.strip() if self.description is not None else None
        return self.model_copy(
            update={
                "name": self.name.strip(),
                "connection_string": self.connection_string.strip(),
                "description": description,
                "settings": self.settings.normalized() if self.settings is not None else None,
            }
        )

    def with_updates(self, **changes: object) -> Profile:
        """Return a copy with the given fields replaced."""

        return self.model_copy(update=changes)


class ProfileCollection(BaseModel):
    """Ordered profiles backing one configuration file."""

    model_config = ConfigDict(frozen=True)

    databases: tuple[Profile, ...] = ()

    def names(self) -> tuple[str, ...]:
        return tuple(profile.name for profile in self.databases)

    def get(self, name: str) -> Profile | None:
        for profile in self.databases:
            if profile.name == name:
                return profile
        return None

    def index_of(self, name: str) -> int | None:
        for idx, profile in enumerate(self.databases):
            if profile.name == name:
                return idx
        return None

    def first(self) -> Profile | None:
        return self.databases[0] if self.databases else None

    @classmethod
    def from_json(cls, raw: str | bytes) -> ProfileCollection:
        """Parse file contents; raises pydantic's ValidationError on bad input."""

        return cls.model_validate_json(raw)

    def to_json(self) -> str:
        return self.model_dump_json(indent=2, by_alias=True, exclude_none=True)


def _normalize_flag(value: str) -> str:
    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in {"true", "false"}:
        return lowered
    return stripped


__all__ = [
    "EngineType",
    "Profile",
    "ProfileCollection",
    "ProfileSettings",
]

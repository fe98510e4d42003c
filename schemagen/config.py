"""Configuration management for schemagen."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.schemagen/.env
    3. Package directory (where this file is located)
    """
    # Current directory
    if os.path.exists(".env"):
        return ".env"

    # User config directory
    user_env = Path.home() / ".schemagen" / ".env"
    if user_env.exists():
        return str(user_env)

    # Package directory
    package_dir = Path(__file__).parent.parent
    package_env = package_dir / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from SCHEMAGEN_* environment variables."""

    driver: str = Field(
        default="postgres",
        description="Database driver: postgres, duckdb or snowflake"
    )
    schema_name: Optional[str] = Field(
        default=None,
        description="Schema to read (default depends on the driver)"
    )

    # PostgreSQL connection
    postgres_dbname: Optional[str] = Field(default=None, description="PostgreSQL database name")
    postgres_host: str = Field(default="localhost", description="PostgreSQL host")
    postgres_port: int = Field(default=5432, description="PostgreSQL port")
    postgres_user: Optional[str] = Field(default=None, description="PostgreSQL user")
    postgres_password: Optional[str] = Field(default=None, description="PostgreSQL password")
    postgres_sslmode: str = Field(default="prefer", description="PostgreSQL sslmode")

    # DuckDB connection
    duckdb_path: Optional[str] = Field(
        default=None,
        description="Path to the DuckDB database file"
    )

    # Snowflake connection
    snowflake_database: Optional[str] = Field(default=None, description="Snowflake database")
    snowflake_account: Optional[str] = Field(default=None, description="Snowflake account")
    snowflake_user: Optional[str] = Field(default=None, description="Snowflake user")
    snowflake_password: Optional[str] = Field(default=None, description="Snowflake password")
    snowflake_warehouse: Optional[str] = Field(default=None, description="Snowflake warehouse")
    snowflake_role: Optional[str] = Field(default=None, description="Snowflake role")

    # Schema building
    whitelist: List[str] = Field(
        default_factory=list,
        description="Only build these tables (JSON list)"
    )
    blacklist: List[str] = Field(
        default_factory=list,
        description="Skip these tables (JSON list)"
    )
    strict: bool = Field(
        default=False,
        description="Fail when foreign keys reference missing columns"
    )
    fetch_workers: int = Field(
        default=1,
        description="Threads used to fetch table metadata"
    )

    class Config:
        env_prefix = "SCHEMAGEN_"
        env_file = _find_env_file()
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()

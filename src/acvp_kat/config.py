# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Configuration management for the ACVP KAT harness."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Harness settings loaded from environment variables (prefix ACVP_KAT_)."""

    model_config = SettingsConfigDict(
        env_prefix="ACVP_KAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Response envelope
    acv_version: str = Field(default="1.0", description="acvVersion written to the response envelope")
    pretty_print: bool = Field(default=True, description="Indent serialized responses")
    verbose: bool = Field(default=False, description="Log the full response at INFO instead of DEBUG")

    # Reference KDF108 handler
    fixed_data_length: int = Field(
        default=32, ge=1, le=512, description="Bytes of fixed data generated per test case"
    )

    # Vector sets without an "algorithm" field
    default_algorithm: str = Field(default="KDF", description="Algorithm assumed when absent")


# Global settings instance
settings = Settings()

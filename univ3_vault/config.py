"""
Configuration for the vault engine

Defines the vault's configuration surface (identities, protocol fee split,
rerange band width, bootstrap share multiplier) and loads it from
environment variables / a .env file.
"""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_PROTOCOL_FEE_BPS,
    DEFAULT_SHARE_MULTIPLIER,
    DEFAULT_TICK_WIDTH,
    PROTOCOL_FEE_DENOMINATOR,
)


class VaultConfig(BaseModel):
    """Vault configuration, fixed at initialization"""
    owner: str = Field(..., description="Owner identity, allowed to rerange", min_length=1)
    admin: str = Field(..., description="Admin identity, allowed to rerange", min_length=1)
    protocol_fee_bps: int = Field(
        default=DEFAULT_PROTOCOL_FEE_BPS,
        description="Share of collected trading fees skimmed to the protocol (basis points)",
        ge=0,
        le=PROTOCOL_FEE_DENOMINATOR,
    )
    tick_width: int = Field(
        default=DEFAULT_TICK_WIDTH,
        description="Half-width of the rerange band in ticks; must be a multiple of the pool tick spacing",
        gt=0,
    )
    share_multiplier: int = Field(
        default=DEFAULT_SHARE_MULTIPLIER,
        description="Shares minted per unit of liquidity for the first deposit",
        gt=0,
    )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "owner": "0x1111111111111111111111111111111111111111",
                "admin": "0x2222222222222222222222222222222222222222",
                "protocol_fee_bps": 100,
                "tick_width": 600,
                "share_multiplier": 1000000
            }
        }

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "VaultConfig":
        """Build a config from VAULT_* environment variables

        Values in ``env_file`` (or a .env found from the working directory)
        never override variables already set in the environment.
        """
        load_dotenv(env_file)

        return cls(
            owner=os.getenv("VAULT_OWNER", ""),
            admin=os.getenv("VAULT_ADMIN", ""),
            protocol_fee_bps=int(os.getenv("VAULT_PROTOCOL_FEE_BPS", DEFAULT_PROTOCOL_FEE_BPS)),
            tick_width=int(os.getenv("VAULT_TICK_WIDTH", DEFAULT_TICK_WIDTH)),
            share_multiplier=int(os.getenv("VAULT_SHARE_MULTIPLIER", DEFAULT_SHARE_MULTIPLIER)),
        )

    def protocol_fee(self, collected: int) -> int:
        """Protocol skim for a collected fee amount (rounded down)"""
        return collected * self.protocol_fee_bps // PROTOCOL_FEE_DENOMINATOR

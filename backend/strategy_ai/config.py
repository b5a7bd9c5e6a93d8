"""
Central configuration for search tunables.
Pydantic models give type-safe, validated settings for both engines.
"""
from __future__ import annotations

import os
import logging
from typing import Dict, Any, Optional

from pydantic import BaseModel, Field, field_validator


class SearchSettings(BaseModel):
    """Adversarial search settings."""

    default_ply: int = Field(default=4, ge=1, le=12, description="Default ply budget per decision")
    order_children: bool = Field(default=True, description="Sort children by static utility before recursing")

    @field_validator('default_ply', mode='before')
    @classmethod
    def validate_int_fields(cls, v):
        return int(v)


class PlannerSettings(BaseModel):
    """Forward planner settings."""

    load_amount: int = Field(default=100, ge=1, description="Resource carried by one full load")
    harvest_cost: float = Field(default=1.0, ge=0, description="Cost of one harvest action")
    deposit_cost: float = Field(default=1.0, ge=0, description="Cost of one deposit action")
    max_expansions: Optional[int] = Field(default=None, ge=1, description="Expansion budget (None = until the frontier empties)")
    fail_fast_on_unreachable: bool = Field(default=True, description="Reject goals the map cannot supply before searching")

    @field_validator('load_amount', mode='before')
    @classmethod
    def validate_int_fields(cls, v):
        return int(v)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class StrategyConfig(BaseModel):
    """Main configuration model for the search core."""

    search: SearchSettings = Field(default_factory=SearchSettings)
    planner: PlannerSettings = Field(default_factory=PlannerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    version: str = Field(default="1.0.0", description="Configuration version")

    @classmethod
    def from_env(cls) -> 'StrategyConfig':
        """Create configuration from environment variables."""
        max_expansions = os.getenv('STRATEGY_AI_MAX_EXPANSIONS')
        return cls(
            search=SearchSettings(
                default_ply=int(os.getenv('STRATEGY_AI_PLY', '4')),
                order_children=os.getenv('STRATEGY_AI_ORDER_CHILDREN', 'true').lower() == 'true',
            ),
            planner=PlannerSettings(
                load_amount=int(os.getenv('STRATEGY_AI_LOAD_AMOUNT', '100')),
                max_expansions=int(max_expansions) if max_expansions else None,
                fail_fast_on_unreachable=os.getenv('STRATEGY_AI_FAIL_FAST', 'true').lower() == 'true',
            ),
            logging=LoggingSettings(
                log_level=os.getenv('STRATEGY_AI_LOG_LEVEL', 'INFO'),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'search': self.search.model_dump(),
            'planner': self.planner.model_dump(),
            'logging': self.logging.model_dump(),
            'version': self.version,
        }


# Global configuration instance
_config: Optional[StrategyConfig] = None


def get_config() -> StrategyConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = StrategyConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


def get_search_settings() -> SearchSettings:
    """Get adversarial search settings."""
    return get_config().search


def get_planner_settings() -> PlannerSettings:
    """Get planner settings."""
    return get_config().planner


def setup_logging() -> None:
    """Configure root logging once, controlled by env var STRATEGY_AI_LOG_LEVEL."""
    if getattr(setup_logging, "_configured", False):
        return
    level: int = getattr(logging, get_config().logging.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    setup_logging._configured = True  # type: ignore[attr-defined]

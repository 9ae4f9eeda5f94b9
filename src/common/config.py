"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CATEGORIES_PATH = CONFIG_DIR / "categories.yaml"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class SupabaseSettings(BaseModel):
    """Connection settings for the Supabase-backed listing store."""
    url: str = Field(
        default_factory=lambda: os.getenv("SUPABASE_URL", "")
        or os.getenv("NEXT_PUBLIC_SUPABASE_URL", "")
    )
    key: str = Field(
        default_factory=lambda: os.getenv("SUPABASE_SERVICE_KEY", "")
        or os.getenv("NEXT_PUBLIC_SUPABASE_ANON_KEY", "")
    )
    listings_table: str = "ads"


class MatchingSettings(BaseModel):
    """Pool sizes and cut-offs for pairwise exchange matching."""
    wanted_category_limit: int = 15
    reverse_exchange_limit: int = 10
    text_match_limit: int = 6
    score_floor: int = 15
    max_results: int = 12


class ChainSettings(BaseModel):
    """Search breadth for 3-way chain detection."""
    b_candidate_limit: int = 10
    c_candidate_limit: int = 5
    max_chains: int = 3
    chain_score: int = 70


class Settings(BaseModel):
    """Top-level application settings."""
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    chains: ChainSettings = Field(default_factory=ChainSettings)
    categories_path: str = str(DEFAULT_CATEGORIES_PATH)

    @property
    def categories_abs_path(self) -> Path:
        """Resolve the category config path relative to project root."""
        p = Path(self.categories_path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p

    @classmethod
    def load(cls, path: str | Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = Path(path) if path else CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


# Singleton settings instance
settings = Settings.load()

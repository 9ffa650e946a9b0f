"""
Runtime settings for ABI validation.

Values come from the environment (optionally a local ``.env`` file):
  ABI_SCHEMA_MAX_NESTING_DEPTH     cap on nested tuple components (default 32)
  ABI_SCHEMA_ALLOW_TYPELESS_ITEMS  accept pre-discriminant function items (default true)

Every public validation function also takes keyword overrides, so these are
only defaults.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


MAX_NESTING_DEPTH = int(os.getenv("ABI_SCHEMA_MAX_NESTING_DEPTH", "32"))
ALLOW_TYPELESS_ITEMS = _env_bool("ABI_SCHEMA_ALLOW_TYPELESS_ITEMS", True)

import logging
import os
from dataclasses import dataclass, fields, replace

import streamlit as st

logger = logging.getLogger(__name__)

# --- DEFAULTS ---
STORE_BACKENDS = ("memory", "mongodb")
MAX_MEMORY_PAIRS = 8

# Environment variable -> settings field
ENV_VARS = {
    "MINILOGIC_STORE": "store_backend",
    "MINILOGIC_MONGODB_URI": "mongodb_uri",
    "MINILOGIC_MONGODB_DATABASE": "mongodb_database",
    "MINILOGIC_MONGODB_COLLECTION": "mongodb_collection",
    "MINILOGIC_STATE_PREFIX": "state_prefix",
    "MINILOGIC_ANONYMOUS_HANDLE": "anonymous_handle",
    "MINILOGIC_REVEAL_DELAY": "reveal_delay",
    "MINILOGIC_MEMORY_PAIRS": "memory_pairs",
}

# [mongodb] secrets key -> settings field
MONGODB_SECRETS = {
    "uri": "mongodb_uri",
    "database": "mongodb_database",
    "collection": "mongodb_collection",
}


@dataclass(frozen=True)
class PortalSettings:
    store_backend: str = "memory"
    mongodb_uri: str = ""
    mongodb_database: str = "minilogicplay"
    mongodb_collection: str = "game_state"
    state_prefix: str = "mlp_state"
    identity_key: str = "minilogic_user"
    anonymous_handle: str = "anon"
    reveal_delay: float = 0.7
    memory_pairs: int = MAX_MEMORY_PAIRS

    def __post_init__(self):
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"Unknown store backend '{self.store_backend}'. Expected one of {STORE_BACKENDS}."
            )
        if self.store_backend == "mongodb" and not self.mongodb_uri:
            raise ValueError("The mongodb store backend requires a connection uri.")
        # Clamp pairs to the available symbol set
        object.__setattr__(self, "memory_pairs", max(1, min(int(self.memory_pairs), MAX_MEMORY_PAIRS)))
        object.__setattr__(self, "reveal_delay", max(0.0, float(self.reveal_delay)))


def _coerce(name: str, raw):
    """Casts a raw env/secrets value to the type of the matching settings field."""
    if name == "reveal_delay":
        return float(raw)
    if name == "memory_pairs":
        return int(raw)
    return str(raw)


def _read_secrets() -> dict:
    """Reads the [mongodb] section of st.secrets. Missing secrets are not an error."""
    try:
        section = st.secrets["mongodb"]
    except Exception as e:
        # No secrets.toml, or no [mongodb] section in it
        logger.debug("No mongodb secrets available: %s", e)
        return {}

    values = {field: section[key] for key, field in MONGODB_SECRETS.items() if key in section}
    if values.get("mongodb_uri"):
        # A configured uri means the deployment wants the database backend
        values.setdefault("store_backend", "mongodb")
    return values


def _read_env(environ) -> dict:
    return {field: environ[var] for var, field in ENV_VARS.items() if environ.get(var)}


def load_settings(overrides: dict | None = None, environ=None, use_secrets: bool = True) -> PortalSettings:
    """
    Resolves portal settings. Precedence, highest first:
    explicit overrides, MINILOGIC_* environment variables, st.secrets, defaults.
    """
    environ = os.environ if environ is None else environ
    known = {f.name for f in fields(PortalSettings)}

    values = {}
    if use_secrets:
        values.update(_read_secrets())
    values.update(_read_env(environ))
    values.update(overrides or {})

    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown settings: {sorted(unknown)}")

    settings = replace(PortalSettings(), **{k: _coerce(k, v) for k, v in values.items()})
    logger.debug("Loaded settings with store backend '%s'", settings.store_backend)
    return settings

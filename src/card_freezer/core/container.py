"""Application dependency container."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from card_freezer.core.config import AppConfig, configure_logging, get_pass_key, load_config
from card_freezer.core.crypto import resolve_pass_key
from card_freezer.models.attribute import AttributeKey
from card_freezer.services.attribute_store import AttributeStore


@dataclass
class FreezerContainer:
    """Creates attribute stores that share the configured pass key."""

    config: AppConfig
    pass_key: bytes

    def new_store(self, values: Mapping[AttributeKey, Any] | None = None) -> AttributeStore:
        """Create a store from plain-text values."""
        return AttributeStore(values, pass_key=self.pass_key)

    def load_store(self, values: Mapping[AttributeKey, Any]) -> AttributeStore:
        """Create a store from values read back from storage."""
        return AttributeStore(pass_key=self.pass_key).from_array(values, from_storage=True)


def build_container(config_path: Path | None = None) -> FreezerContainer:
    """Load configuration, set up logging and resolve the pass key."""
    config = load_config(config_path)
    configure_logging(config)
    return FreezerContainer(
        config=config,
        pass_key=resolve_pass_key(get_pass_key(config)),
    )

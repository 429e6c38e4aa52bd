# src/bem_config/__init__.py
"""
BEM Config — resolução de configuração em cascata para projetos BEM.

Uso típico:

    from bem_config import BemConfig

    config = BemConfig("/path/to/project")
    config.level_config_sync("common.blocks")
    await config.resolve_set_levels("desktop")
"""

from .cascade import BemConfig, create
from .core.errors import (
    BemConfigError,
    ConfigTypeConflictError,
    CyclicSetReferenceError,
    DiscoveryError,
    InvalidLibraryDeclarationError,
    InvalidSetDeclarationError,
    LibraryNotFoundError,
    PluginError,
)

__all__ = [
    "BemConfig",
    "create",
    "BemConfigError",
    "ConfigTypeConflictError",
    "CyclicSetReferenceError",
    "DiscoveryError",
    "InvalidLibraryDeclarationError",
    "InvalidSetDeclarationError",
    "LibraryNotFoundError",
    "PluginError",
]

__version__ = "0.1.0"

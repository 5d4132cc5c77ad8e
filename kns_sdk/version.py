"""
Version constants for the KNS Python SDK.
"""

# Bump this when publishing
__version__ = "0.4.0"

# Writes always target this registry generation.
CURRENT_REGISTRY_VERSION = 3

__all__ = ["__version__", "CURRENT_REGISTRY_VERSION"]

# ============================================================================
# VERSION - SCHEMA ENGINE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# ============================================================================
"""
Version information for the schema engine.

This is the single source of truth for the package version.
Updated manually for each release.
"""
# Version format: major.minor.patch
# Criteria for 0.1 - types, simple schema documents and generation order all work
__version__ = "0.1.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-19"

EPOCH = 1
CODENAME = "Schema Inference"

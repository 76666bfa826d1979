"""
Filesystem path constants for the publish pipeline.

Centralizes the default project layout so stages never hard-code paths.
All values are relative to the project root unless noted.
"""

from pathlib import Path

PROJECT_ROOT = Path(".")

# Client crate layout
CLIENT_WORKSPACE = "client"
STAGING_SUBDIR = "build"
ASSETS_SUBDIR = "assets"

# Shared cargo target directory at the workspace root
CARGO_TARGET_DIR = "target"

# Directory the server serves static files from
SERVER_ASSETS_DIR = "server/assets"

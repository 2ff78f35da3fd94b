"""Pytest configuration: ensure env vars and import path are set early.

This runs before any tests, so modules can import without local path hacks.
Also load .env before setting defaults so local overrides are honored.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

load_dotenv(override=False)

# Keep routing defaults deterministic regardless of the developer's shell
os.environ["UNHANDLED_INTENT"] = "UNHANDLED"
os.environ["INTENT_MAP"] = "{}"
os.environ.setdefault("DIALOG_ROUTER_LOG_LEVEL", "debug")

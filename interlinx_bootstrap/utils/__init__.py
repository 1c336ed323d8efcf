"""Utility module for the Interlinx bootstrap installer.

This module provides cross-cutting utilities:
- Logging: Configured logging with credential redaction
- Validators: Input validation for repository slugs and version tags
"""

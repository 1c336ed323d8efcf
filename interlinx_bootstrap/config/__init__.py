"""Configuration module for the Interlinx bootstrap installer.

This module handles installer settings and credentials:
- SettingsManager: optional JSON settings file
- InstallerSettings: Settings dataclass
- Paths: artifact names and install locations
- Credential / acquire_credential: scoped GitHub token
"""

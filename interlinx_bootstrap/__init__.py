"""Interlinx bootstrap installer.

Resolves, downloads, verifies and installs Interlinx Controller releases
(and the Interlinx Agent) from private GitHub repositories.
"""

__version__ = "1.0.0"

"""
Configuration module for the outbound voice agent.

This module provides centralized configuration management for the entire application,
including constants, logging setup, and environment-based settings.

Key components:
- constants: Application-wide constants, including Realtime API message types,
  the media stream path, the settle delay and default conversation settings.
- logging_config: A consistent logging setup with console and rotating file output.
- settings: The ``Settings`` model loaded from environment variables (and an optional
  ``.env`` file), validated once at startup.

Usage examples:
```python
from outbound_agent.config.logging_config import configure_logging
from outbound_agent.config.settings import Settings, load_env_file

logger = configure_logging()
load_env_file()
settings = Settings.from_env()
logger.info(f"Media stream URL: {settings.stream_url}")
```
"""

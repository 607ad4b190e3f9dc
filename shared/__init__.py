"""
Shared utilities for the module republisher.

This package is intentionally small and focused. It provides:

- `shared.config` for environment-based configuration
- `shared.logging` for structlog-based structured logging

The scanner, publisher and scheduler treat `shared/` as infrastructure
code and keep pipeline-specific logic out of it.
"""

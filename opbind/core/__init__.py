"""Core infrastructure package for shared functionality.

- **config**: Centralized configuration management with environment support
- **exceptions**: Structured exception hierarchy with error codes
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Structured logging with Loguru
- **types**: Type aliases for better code clarity
"""

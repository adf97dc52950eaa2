# habitlens/utils/error_handler.py
"""
Centralized error handling and validation for habitlens.
"""
import json
import logging
from functools import wraps
from typing import Any, Optional

import typer
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when habit snapshot data fails validation."""
    pass


def handle_cli_errors(operation_name: str):
    """Decorator for consistent error reporting in CLI commands."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ValidationError as e:
                logger.warning(f"{operation_name} - Validation error: {e}")
                console.print(f"[red]Validation error: {e}[/red]")
                raise typer.Exit(1)
            except json.JSONDecodeError as e:
                logger.error(f"{operation_name} - Invalid JSON: {e}")
                console.print(f"[red]Snapshot is not valid JSON: {e}[/red]")
                raise typer.Exit(1)
            except OSError as e:
                logger.error(f"{operation_name} - I/O error: {e}")
                console.print(f"[red]Could not read snapshot: {e}[/red]")
                raise typer.Exit(1)
        return wrapper
    return decorator


def require_text(value: Any, field_name: str, max_length: int = 200) -> str:
    """Return a stripped, non-empty string or raise ValidationError."""
    text = sanitize_string(value, max_length=max_length)
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def safe_convert_to_int(value: Any, field_name: str, default: Optional[int] = None) -> Optional[int]:
    """Safely convert a value to integer with proper error handling."""
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}: must be a valid integer")
    try:
        return int(value)
    except (ValueError, TypeError):
        if default is not None:
            logger.warning(
                f"Could not convert {field_name} '{value}' to int, using default {default}")
            return default
        raise ValidationError(f"Invalid {field_name}: must be a valid integer")


def validate_rating(value: Any, field_name: str) -> Optional[int]:
    """Validate an optional 1-10 rating (mood, difficulty)."""
    rating = safe_convert_to_int(value, field_name)
    if rating is None:
        return None
    if not 1 <= rating <= 10:
        raise ValidationError(f"{field_name} must be between 1 and 10")
    return rating


def sanitize_string(value: Any, max_length: int = 500) -> Optional[str]:
    """Sanitize and truncate string values."""
    if value is None:
        return None

    sanitized = str(value).strip()
    if not sanitized:
        return None

    if len(sanitized) > max_length:
        logger.warning(
            f"Truncating string from {len(sanitized)} to {max_length} characters")
        sanitized = sanitized[:max_length]

    return sanitized

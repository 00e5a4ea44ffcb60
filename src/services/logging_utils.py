"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across recipe, favorite and catalog
operations.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    # Log successful operation
    log_operation(
        logger,
        operation="create_recipe",
        outcome="success",
        recipe_id=123,
        owner_id=7,
    )

    # Log a rejected invariant
    log_operation(
        logger,
        operation="add_favorite",
        outcome="self_favorite",
        level=logging.WARNING,
        recipe_id=123,
        user_id=7,
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "recipe_catalog.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger instance with the 'recipe_catalog.services' prefix.

    Example:
        >>> logger = get_service_logger(__name__)
        >>> logger.name
        'recipe_catalog.services.recipe_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The message is "<operation>: <outcome>"; the operation, outcome and any
    context fields are attached to the record via ``extra``.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "create_recipe", "add_favorite")
        outcome: Outcome description (e.g., "success", "duplicate_title")
        level: Log level (default: INFO). Rejections use WARNING.
        **context: Additional context fields (entity IDs, counts, names)
            Common fields:
            - recipe_id: Recipe being processed
            - user_id / owner_id / requester_id: Acting or owning user
            - removed / updated / added: Ingredient reconciliation counts
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)


def configure_logging(level: int = logging.INFO) -> None:
    """
    Configure root logging for command-line use.

    Args:
        level: Root log level
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

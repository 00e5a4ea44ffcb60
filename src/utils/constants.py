"""
Constants for the Recipe Catalog backend.

This module defines all system-wide constants including:
- Application metadata
- Field length limits for recipes, categories and ingredients
- Standard error messages
"""

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Recipe Catalog"
APP_VERSION = "0.1.0"
DATABASE_VERSION = "1.0"
DATABASE_FILENAME = "recipe_catalog.db"

# Environment variables
ENV_VAR_ENVIRONMENT = "RECIPE_CATALOG_ENV"
ENV_VAR_DATABASE_URL = "RECIPE_CATALOG_DATABASE_URL"
ENV_VAR_LOG_LEVEL = "RECIPE_CATALOG_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "INFO"

# ============================================================================
# Validation Limits
# ============================================================================

# Recipe text fields (min, max)
TITLE_LENGTH = (5, 100)
DESCRIPTION_LENGTH = (10, 100)
PREPARATION_LENGTH = (5, 100)

MAX_CATEGORY_NAME_LENGTH = 50
MIN_INGREDIENT_NAME_LENGTH = 2
MAX_INGREDIENT_NAME_LENGTH = 50
MAX_USERNAME_LENGTH = 20
MAX_EMAIL_LENGTH = 50
MAX_IMAGE_URL_LENGTH = 500

# ============================================================================
# Error Messages
# ============================================================================

ERROR_REQUIRED_FIELD = "This field is required"
ERROR_INVALID_NUMBER = "Please enter a valid number"
ERROR_INVALID_POSITIVE = "Value must be greater than zero"
ERROR_NO_INGREDIENTS = "At least one ingredient is required"
ERROR_UNEXPECTED = "An unexpected error occurred"

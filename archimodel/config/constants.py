"""
Configuration Constants for archimodel

Values the codecs and the view operations fall back on when a document or a
caller leaves something unspecified. Defaults follow what Archi itself writes.

Usage in code:
    from archimodel.config.constants import CODEC_CONFIG
    filename = CODEC_CONFIG.MODEL_FILENAME
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ============================================================================
# CODEC CONSTANTS
# ============================================================================

@dataclass
class CodecConfig:
    """
    Defaults shared by the folder-organized and exchange codecs.

    Notes:
        - MODEL_FILENAME is used when a directory is given instead of a file
        - DEFAULT_OBJECT_WIDTH/HEIGHT replace Archi's "-1" (default size)
        - DEFAULT_LANGUAGE tags every localized name/documentation on write
    """

    MODEL_FILENAME: str = "model.archimate"
    MODEL_SUFFIX: str = ".archimate"
    DEFAULT_MODEL_VERSION: str = "5.0.0"
    DEFAULT_LANGUAGE: str = "en"
    DEFAULT_OBJECT_WIDTH: int = 120
    DEFAULT_OBJECT_HEIGHT: int = 55
    ENCODING: str = "UTF-8"
    INDENT: str = "  "

    def __post_init__(self):
        """Validate configuration values."""
        if not self.MODEL_FILENAME.endswith(self.MODEL_SUFFIX):
            raise ValueError(f"MODEL_FILENAME must end with {self.MODEL_SUFFIX}, got {self.MODEL_FILENAME}")
        if self.DEFAULT_OBJECT_WIDTH <= 0 or self.DEFAULT_OBJECT_HEIGHT <= 0:
            raise ValueError("Default object size must be positive")
        if not self.DEFAULT_LANGUAGE:
            raise ValueError("DEFAULT_LANGUAGE must not be empty")

# Global instance
CODEC_CONFIG = CodecConfig()

# ============================================================================
# XML NAMESPACES
# ============================================================================

@dataclass
class NamespaceConfig:
    """XML namespaces used by the two formats."""

    XSI: str = "http://www.w3.org/2001/XMLSchema-instance"
    XML: str = "http://www.w3.org/XML/1998/namespace"

    # Folder-organized (.archimate) format
    ARCHIMATE: str = "http://www.archimatetool.com/archimate"

    # Open Group exchange format
    EXCHANGE: str = "http://www.opengroup.org/xsd/archimate/3.0/"
    EXCHANGE_SCHEMA_LOCATION: str = (
        "http://www.opengroup.org/xsd/archimate/3.0/ "
        "http://www.opengroup.org/xsd/archimate/3.1/archimate3_Model.xsd"
    )

# Global instance
NAMESPACES = NamespaceConfig()

# ============================================================================
# VIEW LAYOUT CONSTANTS
# ============================================================================
# Grid used when an element is added to a view without explicit coordinates.

@dataclass
class ViewLayoutConfig:
    """Auto-placement grid for diagram objects."""

    COLUMNS: int = 5
    COLUMN_STEP: int = 150
    ROW_STEP: int = 100
    MARGIN: int = 50

    def __post_init__(self):
        assert self.COLUMNS > 0, "COLUMNS must be positive"
        assert self.COLUMN_STEP > 0 and self.ROW_STEP > 0, "Grid steps must be positive"

    def position_for(self, index: int):
        """Grid position (x, y) for the index-th object on a view."""
        x = (index % self.COLUMNS) * self.COLUMN_STEP + self.MARGIN
        y = (index // self.COLUMNS) * self.ROW_STEP + self.MARGIN
        return x, y

# Global instance
VIEW_LAYOUT = ViewLayoutConfig()

# ============================================================================
# ENVIRONMENT OVERRIDES
# ============================================================================

ENV_MODEL_FILENAME = "ARCHIMODEL_MODEL_FILENAME"
ENV_DEFAULT_LANGUAGE = "ARCHIMODEL_DEFAULT_LANGUAGE"
ENV_DEFAULT_VERSION = "ARCHIMODEL_DEFAULT_VERSION"


def apply_config(config: CodecConfig) -> CodecConfig:
    """
    Copy every field of ``config`` onto the global CODEC_CONFIG.

    The codecs and model operations read CODEC_CONFIG at call time, so the
    new values take effect for every later read or write.

    Returns:
        The global CODEC_CONFIG
    """
    for config_field in fields(CodecConfig):
        setattr(CODEC_CONFIG, config_field.name, getattr(config, config_field.name))
    return CODEC_CONFIG


def load_config(env_file: Optional[str] = ".env", apply: bool = True) -> CodecConfig:
    """
    Build a CodecConfig with overrides from the environment.

    Args:
        env_file: Optional .env file loaded with python-dotenv before reading
                  the environment; existing variables are not overridden
        apply: Copy the result onto the global CODEC_CONFIG (default). With
               False the global is left untouched.

    Returns:
        The CodecConfig built from the environment
    """
    if env_file and os.path.exists(env_file):
        load_dotenv(env_file)
        logger.info(f"Loaded environment variables from {env_file}")

    defaults = CodecConfig()
    config = CodecConfig(
        MODEL_FILENAME=os.getenv(ENV_MODEL_FILENAME, defaults.MODEL_FILENAME),
        DEFAULT_LANGUAGE=os.getenv(ENV_DEFAULT_LANGUAGE, defaults.DEFAULT_LANGUAGE),
        DEFAULT_MODEL_VERSION=os.getenv(ENV_DEFAULT_VERSION, defaults.DEFAULT_MODEL_VERSION),
    )
    logger.debug(f"Codec config: filename={config.MODEL_FILENAME}, language={config.DEFAULT_LANGUAGE}")

    if apply:
        apply_config(config)
        logger.info(f"Applied codec config: model file {config.MODEL_FILENAME}, version {config.DEFAULT_MODEL_VERSION}")
    return config

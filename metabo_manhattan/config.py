"""
Shared configuration for the Manhattan plotting pipeline.
Centralizes paths, plot defaults, and validation logic.
"""

from pathlib import Path
import logging
from typing import Optional, Dict, Any
import os

import yaml

from .constants import (
    DEFAULT_THRESHOLD,
    DEFAULT_TOP_N,
    DEFAULT_FACET_ROWS,
    DEFAULT_PALETTE,
    DEFAULT_HIGHLIGHT_COLOR,
    DEFAULT_EXPORT_FORMAT,
    EXPORT_FORMATS,
    RENDER_MODES,
)

# Initialize logging once when module is imported
LOGGER_NAME = "metabo_manhattan"
_root_logger = logging.getLogger()
if not _root_logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )
logger = logging.getLogger(LOGGER_NAME)


def get_project_root() -> Path:
    """Get the repository root directory."""
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = get_project_root()
CONFIG_DIR = PROJECT_ROOT / "config"

# Outputs are relative to the working directory, not the install location
DATA_PROCESSED_DIR = Path("data_processed")
REPORTS_DIR = DATA_PROCESSED_DIR / "reports"
FIGURES_DIR = REPORTS_DIR / "figures"

DEFAULT_CONFIG_PATH = CONFIG_DIR / "manhattan.yaml"

# Environment overrides take precedence over the YAML file
ENV_THRESHOLD = "MANHATTAN_THRESHOLD"
ENV_TOP_N = "MANHATTAN_TOP_N"

DEFAULT_PLOT_CONFIG: Dict[str, Any] = {
    "threshold": DEFAULT_THRESHOLD,
    "top_n": DEFAULT_TOP_N,
    "mode": "separate",
    "facet_rows": DEFAULT_FACET_ROWS,
    "highlight_labels": False,
    "boxed_labels": False,
    "palette": list(DEFAULT_PALETTE),
    "highlight_color": DEFAULT_HIGHLIGHT_COLOR,
    "export_format": DEFAULT_EXPORT_FORMAT,
}


def validate_file_exists(path: Path, context: str = "") -> None:
    """Validate that a file exists, raise informative error if not."""
    if not path.exists():
        context_msg = f" ({context})" if context else ""
        raise FileNotFoundError(
            f"Required file missing: {path}{context_msg}\n"
            f"Please check the input path."
        )


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    threshold = os.getenv(ENV_THRESHOLD)
    if threshold:
        config["threshold"] = float(threshold)
    top_n = os.getenv(ENV_TOP_N)
    if top_n:
        config["top_n"] = int(top_n)
    return config


def validate_plot_config(config: Dict[str, Any], source: str = "<defaults>") -> None:
    """
    Validate plot settings and fail fast on values the renderer cannot use.

    Raises:
        ValueError: If any setting is out of range or of the wrong shape
    """
    if config["mode"] not in RENDER_MODES:
        raise ValueError(
            f"Unknown mode {config['mode']!r}; expected one of {list(RENDER_MODES)}\n"
            f"Config file: {source}"
        )

    palette = config["palette"]
    if not isinstance(palette, (list, tuple)) or len(palette) != 2:
        raise ValueError(
            f"palette must list exactly two colors, got {palette!r}\n"
            f"Config file: {source}"
        )

    if config["export_format"] not in EXPORT_FORMATS:
        raise ValueError(
            f"Unknown export_format {config['export_format']!r}; expected one of {list(EXPORT_FORMATS)}\n"
            f"Config file: {source}"
        )

    if int(config["facet_rows"]) < 1:
        raise ValueError(f"facet_rows must be >= 1, got {config['facet_rows']}\nConfig file: {source}")

    if float(config["threshold"]) < 0:
        raise ValueError(f"threshold must be non-negative, got {config['threshold']}\nConfig file: {source}")


def load_plot_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load plot configuration from a YAML file merged over the defaults.

    Args:
        config_path: Path to a YAML file. When omitted, ``config/manhattan.yaml``
            is used if present, otherwise the built-in defaults.

    Returns:
        Dictionary containing every plot setting

    Raises:
        FileNotFoundError: If an explicit config path does not exist
        ValueError: If the file is not valid YAML or holds invalid settings
    """
    config = dict(DEFAULT_PLOT_CONFIG)
    source = "<defaults>"

    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH

    if config_path is not None:
        config_path = Path(config_path)
        validate_file_exists(config_path, "plot configuration")
        source = str(config_path)

        try:
            with open(config_path, 'r') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(
                f"Failed to parse YAML plot config: {e}\n"
                f"Config file: {config_path}"
            )

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(
                f"Invalid config format: expected dict, got {type(loaded)}\n"
                f"Config file: {config_path}"
            )

        unknown = sorted(set(loaded) - set(DEFAULT_PLOT_CONFIG))
        if unknown:
            logger.warning(f"Ignoring unknown plot config keys {unknown} in {config_path}")
        config.update({k: v for k, v in loaded.items() if k in DEFAULT_PLOT_CONFIG})

    config = _apply_env_overrides(config)
    validate_plot_config(config, source)

    logger.info(
        f"Plot config loaded from {source}: threshold={config['threshold']}, "
        f"top_n={config['top_n']}, mode={config['mode']}"
    )
    return config

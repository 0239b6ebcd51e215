"""Console colors for brewsync.

Every Rich style the CLI prints with is derived from a small palette.
The palette can be overridden per user with a ``[colors]`` table in
theme.toml; invalid overrides are reported and ignored.
"""

import logging
import re
import tomllib
from functools import cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from brewsync.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


class ThemeColors(BaseModel):
    """Palette used to build the Rich theme.

    Values are hex codes in ``#RGB`` or ``#RRGGBB`` form.
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#eeeeee"
    muted: str = "#9e9e9e"
    header: str = "#fbb040"
    border: str = "#6d4c41"

    success: str = "#2ecc71"
    warning: str = "#f1c40f"
    error: str = "#e74c3c"
    info: str = "#3fa9f5"

    # Package added to / removed from a machine, and removals that are kept
    added: str = "#9be564"
    removed: str = "#e74c3c"
    protected: str = "#7f8cff"

    package_type: str = "#e0a96d"
    description: str = "#a0a8b8"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, value: object) -> str:
        if not isinstance(value, str) or not _HEX_COLOR.match(value.strip()):
            msg = f"expected a hex color like '#a0b0c0', got {value!r}"
            raise ValueError(msg)
        return value.strip()


# Rich style name -> (palette field, extra attributes)
_STYLES: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold"),
    "border": ("border", ""),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold"),
    "info": ("info", ""),
    "added": ("added", ""),
    "removed": ("removed", ""),
    "protected": ("protected", ""),
    "package.type": ("package_type", ""),
    "package.name": ("text", "bold"),
    "package.description": ("description", ""),
}


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load the palette, applying overrides from theme.toml.

    Args:
        path: Theme file. If None, uses theme.toml in the config dir.

    Returns:
        Palette with overrides applied, or the defaults when the file is
        missing or invalid.
    """
    theme_path = path or get_theme_path()
    try:
        with open(theme_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return ThemeColors()
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", theme_path, e)
        return ThemeColors()

    overrides = data.get("colors", {})
    if not isinstance(overrides, dict):
        logger.warning("Ignoring theme file %s: 'colors' must be a table", theme_path)
        return ThemeColors()

    try:
        colors = ThemeColors.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Ignoring invalid colors in %s: %s", theme_path, e)
        return ThemeColors()

    logger.debug("Loaded %d color override(s) from %s", len(overrides), theme_path)
    return colors


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme from a palette (loaded from disk if None)."""
    palette = colors or load_theme()
    styles = {}
    for style, (field, attributes) in _STYLES.items():
        color = getattr(palette, field)
        styles[style] = f"{attributes} {color}".strip()
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Return the Rich theme for this process, loaded once."""
    return get_rich_theme()

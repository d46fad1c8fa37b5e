"""Color themes for the terminal-style interface."""
from typing import Optional


REQUIRED_COLOR_KEYS = (
    # Background colors
    "bg-primary",
    "bg-secondary",
    "bg-tertiary",
    "bg-hover",
    "bg-active",
    # Text colors
    "text-primary",
    "text-secondary",
    "text-muted",
    "text-disabled",
    # Border colors
    "border-primary",
    "border-secondary",
    "border-muted",
    # Accent colors
    "accent-primary",
    "accent-success",
    "accent-error",
    "accent-warning",
    "accent-info",
    # Link colors
    "link",
    "link-hover",
    "link-visited",
    # Form elements
    "input-bg",
    "input-border",
    "input-focus",
    "input-text",
    # Button colors
    "button-primary-bg",
    "button-primary-text",
    "button-secondary-bg",
    "button-secondary-text",
)

THEMES: dict[str, dict] = {
    "dark": {
        "name": "Terminal Dark",
        "description": "Classic 80s terminal aesthetic with neon green on dark background",
        "colors": {
            "bg-primary": "#000000",
            "bg-secondary": "#0a0a0a",
            "bg-tertiary": "#1a1a1a",
            "bg-hover": "#1f1f1f",
            "bg-active": "#2a2a2a",
            "text-primary": "#00ff00",
            "text-secondary": "#00cc00",
            "text-muted": "#008800",
            "text-disabled": "#004400",
            "border-primary": "#00ff00",
            "border-secondary": "#00cc00",
            "border-muted": "#006600",
            "accent-primary": "#00ff00",
            "accent-success": "#00ff00",
            "accent-error": "#ff00ff",
            "accent-warning": "#ffff00",
            "accent-info": "#00ffff",
            "link": "#00ffff",
            "link-hover": "#00cccc",
            "link-visited": "#ff00ff",
            "input-bg": "#0a0a0a",
            "input-border": "#00ff00",
            "input-focus": "#00ff00",
            "input-text": "#00ff00",
            "button-primary-bg": "#00ff00",
            "button-primary-text": "#000000",
            "button-secondary-bg": "#1a1a1a",
            "button-secondary-text": "#00ff00",
        },
    },
    "light": {
        "name": "Terminal Light",
        "description": "Inverted terminal palette for bright environments",
        "colors": {
            "bg-primary": "#fafafa",
            "bg-secondary": "#f5f5f5",
            "bg-tertiary": "#e5e5e5",
            "bg-hover": "#e0e0e0",
            "bg-active": "#d5d5d5",
            "text-primary": "#006600",
            "text-secondary": "#008800",
            "text-muted": "#00aa00",
            "text-disabled": "#cccccc",
            "border-primary": "#006600",
            "border-secondary": "#008800",
            "border-muted": "#cccccc",
            "accent-primary": "#006600",
            "accent-success": "#006600",
            "accent-error": "#cc0099",
            "accent-warning": "#cc9900",
            "accent-info": "#0099cc",
            "link": "#0099cc",
            "link-hover": "#007799",
            "link-visited": "#990099",
            "input-bg": "#ffffff",
            "input-border": "#006600",
            "input-focus": "#006600",
            "input-text": "#006600",
            "button-primary-bg": "#006600",
            "button-primary-text": "#fafafa",
            "button-secondary-bg": "#e5e5e5",
            "button-secondary-text": "#006600",
        },
    },
}


def available_themes() -> dict[str, dict]:
    """Get all available themes keyed by name."""
    return THEMES


def get_theme(name: str) -> Optional[dict]:
    """Get a theme definition, or None if there is no such theme."""
    return THEMES.get(name)


def theme_color(key: str, theme: Optional[str] = None, *, default: str = "dark") -> Optional[str]:
    """
    Get a color value from a theme.

    Args:
        key: Color key (e.g. 'bg-primary')
        theme: Theme name; ``default`` is used when omitted
        default: Theme to fall back to, normally the configured app theme

    Returns:
        Hex color string, or None if the theme or key is unknown

    Examples:
        >>> theme_color("bg-primary")
        '#000000'
        >>> theme_color("bg-primary", "light")
        '#fafafa'
    """
    definition = THEMES.get(theme or default)
    if definition is None:
        return None
    return definition["colors"].get(key)

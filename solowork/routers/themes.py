"""Theme router - palettes for the terminal-style interface."""
from fastapi import APIRouter, HTTPException

from solowork.config import settings
from solowork.themes import available_themes, get_theme


router = APIRouter(prefix="/themes", tags=["themes"])


@router.get("")
async def list_themes():
    """List available themes."""
    return available_themes()


@router.get("/current")
async def current_theme():
    """Get the configured theme with its font and colors."""
    theme = get_theme(settings.app_theme)
    if theme is None:
        raise HTTPException(status_code=404, detail=f"Unknown theme: {settings.app_theme}")

    return {
        "name": settings.app_theme,
        "label": theme["name"],
        "description": theme["description"],
        "font": settings.app_font,
        "colors": theme["colors"],
    }


@router.get("/{name}")
async def get_theme_by_name(name: str):
    """Get one theme by name."""
    theme = get_theme(name)
    if theme is None:
        raise HTTPException(status_code=404, detail="Theme not found")
    return theme

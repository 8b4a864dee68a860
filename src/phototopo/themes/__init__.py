"""Theme definitions for topos."""

from phototopo.themes.classic import CLASSIC_THEME
from phototopo.themes.mono import MONO_THEME

THEMES = {
    "classic": CLASSIC_THEME,
    "mono": MONO_THEME,
}

__all__ = ["THEMES", "CLASSIC_THEME", "MONO_THEME"]

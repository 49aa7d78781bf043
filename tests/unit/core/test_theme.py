"""Unit tests for theme loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from setupctl.core.theme import ThemeColors, get_rich_theme, load_theme


class TestThemeColors:
    """Tests for ThemeColors validation."""

    def test_short_hex_accepted(self) -> None:
        """#RGB colors are valid."""
        assert ThemeColors(text="#fff").text == "#fff"

    @pytest.mark.parametrize("value", ["red", "#12345", "#gggggg"])
    def test_invalid_colors(self, value: str) -> None:
        """Non-hex colors are rejected."""
        with pytest.raises(ValidationError):
            ThemeColors(text=value)


class TestLoadTheme:
    """Tests for load_theme."""

    def test_user_override(self, isolated_dirs: Path) -> None:
        """User theme entries override the bundled ones."""
        theme_path = isolated_dirs / "config" / "setupctl" / "theme.toml"
        theme_path.parent.mkdir(parents=True)
        theme_path.write_text('[colors]\nsuccess = "#00ff00"\n')

        colors = load_theme()

        assert colors.success == "#00ff00"
        assert colors.error == ThemeColors().error

    def test_invalid_user_theme_falls_back(self, isolated_dirs: Path) -> None:
        """An invalid user color falls back to defaults."""
        theme_path = isolated_dirs / "config" / "setupctl" / "theme.toml"
        theme_path.parent.mkdir(parents=True)
        theme_path.write_text('[colors]\nsuccess = "green"\n')

        assert load_theme() == ThemeColors()


class TestRichTheme:
    """Tests for get_rich_theme."""

    def test_outcome_styles_present(self) -> None:
        """Styles used for outcome rendering exist."""
        theme = get_rich_theme(ThemeColors())

        for name in ("installed", "present", "failed", "skipped", "success", "warning"):
            assert name in theme.styles

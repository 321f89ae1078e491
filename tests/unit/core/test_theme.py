"""Unit tests for CLI theme loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from xferfilter.core.theme import ThemeColors, get_rich_theme, load_theme


class TestThemeColors:
    """Tests for ThemeColors validation."""

    def test_defaults(self) -> None:
        colors = ThemeColors()
        assert colors.accepted.startswith("#")

    @pytest.mark.parametrize("value", ["red", "#12", "#zzzzzz", "#1234567"])
    def test_invalid_colors(self, value: str) -> None:
        with pytest.raises(ValidationError):
            ThemeColors(error=value)

    def test_short_hex(self) -> None:
        assert ThemeColors(error="#f00").error == "#f00"


class TestLoadTheme:
    """Tests for load_theme."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        assert load_theme(tmp_path / "theme.toml") == ThemeColors()

    def test_partial_override(self, tmp_path: Path) -> None:
        path = tmp_path / "theme.toml"
        path.write_text('[colors]\nrejected = "#ff0000"\n')

        colors = load_theme(path)
        assert colors.rejected == "#ff0000"
        assert colors.accepted == ThemeColors().accepted

    def test_invalid_override_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "theme.toml"
        path.write_text('[colors]\nrejected = "pink"\n')
        assert load_theme(path) == ThemeColors()

    def test_broken_toml_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "theme.toml"
        path.write_text("[colors\n")
        assert load_theme(path) == ThemeColors()

    def test_rich_theme_styles(self) -> None:
        theme = get_rich_theme(ThemeColors())
        for name in ("accepted", "synthesized", "rejected", "folder", "error"):
            assert name in theme.styles

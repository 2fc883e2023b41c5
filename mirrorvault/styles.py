"""Terminal text styles: colours, padding, borders and block layout."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
_RESET = "\x1b[0m"


class Align(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def _char_width(ch: str) -> int:
    if unicodedata.category(ch) in ("Mn", "Me", "Cc", "Cf"):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _line_width(line: str) -> int:
    return sum(_char_width(ch) for ch in _ANSI_RE.sub("", line))


def visible_width(text: str) -> int:
    """Width in terminal cells of the widest line, ignoring escape codes."""
    return max((_line_width(line) for line in text.split("\n")), default=0)


def _color_params(color: str, ground: int) -> str:
    if color.startswith("#"):
        if len(color) != 7:
            raise ValueError(f"invalid hex colour: {color!r}")
        r, g, b = (int(color[i:i + 2], 16) for i in (1, 3, 5))
        return f"{ground};2;{r};{g};{b}"
    code = int(color)
    if not 0 <= code <= 255:
        raise ValueError(f"colour index out of range: {color!r}")
    return f"{ground};5;{code}"


def _align(line: str, width: int, align: Align) -> str:
    gap = width - _line_width(line)
    if gap <= 0:
        return line
    if align is Align.CENTER:
        left = gap // 2
        return " " * left + line + " " * (gap - left)
    if align is Align.RIGHT:
        return " " * gap + line
    return line + " " * gap


@dataclass(frozen=True)
class Style:
    """An immutable description of how to draw a block of text."""

    foreground: str | None = None
    background: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    padding: tuple[int, int] = (0, 0)
    width: int = 0
    align: Align = Align.LEFT
    border: bool = False
    border_foreground: str | None = None
    margin_right: int = 0
    margin_bottom: int = 0

    def with_foreground(self, color: str) -> Style:
        """A copy of this style with another text colour."""
        return replace(self, foreground=color)

    def _sgr(self) -> str:
        params = []
        if self.bold:
            params.append("1")
        if self.italic:
            params.append("3")
        if self.underline:
            params.append("4")
        if self.foreground is not None:
            params.append(_color_params(self.foreground, 38))
        if self.background is not None:
            params.append(_color_params(self.background, 48))
        return f"\x1b[{';'.join(params)}m" if params else ""

    def render(self, text: str) -> str:
        """Draw the text with this style applied."""
        lines = text.split("\n")
        vpad, hpad = self.padding
        content_width = max(
            max(self.width - 2 * hpad, 0),
            max(_line_width(line) for line in lines),
        )
        needs_box = self.width or hpad or vpad or self.border or self.margin_right or self.margin_bottom
        if needs_box:
            lines = [_align(line, content_width, self.align) for line in lines]
            if hpad:
                lines = [" " * hpad + line + " " * hpad for line in lines]
            inner_width = content_width + 2 * hpad
            blank = " " * inner_width
            lines = [blank] * vpad + lines + [blank] * vpad
        else:
            inner_width = content_width

        sgr = self._sgr()
        if sgr:
            lines = [f"{sgr}{line}{_RESET}" for line in lines]

        if self.border:
            edge_sgr = (
                f"\x1b[{_color_params(self.border_foreground, 38)}m"
                if self.border_foreground is not None
                else ""
            )

            def paint(s: str) -> str:
                return f"{edge_sgr}{s}{_RESET}" if edge_sgr else s

            top = paint("╭" + "─" * inner_width + "╮")
            bottom = paint("╰" + "─" * inner_width + "╯")
            side = paint("│")
            lines = [top] + [side + line + side for line in lines] + [bottom]

        if self.margin_right:
            lines = [line + " " * self.margin_right for line in lines]
        if self.margin_bottom:
            total = max(_line_width(line) for line in lines)
            lines += [" " * total] * self.margin_bottom
        return "\n".join(lines)


def join_horizontal(blocks: Iterable[str]) -> str:
    """Place blocks side by side, aligned at the top."""
    split = [block.split("\n") for block in blocks]
    if not split:
        return ""
    height = max(len(lines) for lines in split)
    widths = [max(_line_width(line) for line in lines) for lines in split]
    rows = []
    for row in range(height):
        cells = []
        for lines, width in zip(split, widths):
            line = lines[row] if row < len(lines) else ""
            cells.append(_align(line, width, Align.LEFT))
        rows.append("".join(cells))
    return "\n".join(rows)


def join_vertical(blocks: Iterable[str]) -> str:
    """Stack blocks on top of each other, centred horizontally."""
    lines = [line for block in blocks for line in block.split("\n")]
    if not lines:
        return ""
    width = max(_line_width(line) for line in lines)
    return "\n".join(_align(line, width, Align.CENTER) for line in lines)


TITLE_STYLE = Style(bold=True, foreground="#89b4fa")
SUBTITLE_STYLE = Style(foreground="#bac2de")
MODE_STYLE = Style(foreground="#f9e2af")
SECTION_TITLE_STYLE = Style(bold=True, foreground="#94e2d5")
TILE_STYLE = Style(
    border=True,
    border_foreground="#6c7086",
    padding=(0, 3),
    width=30,
    align=Align.CENTER,
    margin_right=1,
    margin_bottom=1,
)
ENGINE_NAME_STYLE = Style(bold=True, foreground="#cdd6f4")
ENGINE_STYLE = Style(bold=True, foreground="#cdd6f4", underline=True)
AUTH_STYLE = Style(foreground="#f38ba8")
NO_AUTH_STYLE = Style(foreground="#a6e3a1")
ITEM_STYLE = Style(foreground="#bac2de")
DIVIDER_STYLE = Style(foreground="#585b70")
FOOTER_STYLE = Style(foreground="#1e1e2e", background="#89b4fa", padding=(0, 1), bold=True)
KEY_HINT_STYLE = Style(foreground="#eff1f5", background="#45475a", padding=(0, 1))
SUMMARY_BOX_STYLE = Style(
    border=True,
    border_foreground="#89b4fa",
    padding=(1, 3),
    width=50,
    align=Align.LEFT,
)
ERROR_STYLE = Style(foreground="196")
WARN_STYLE = Style(foreground="214")
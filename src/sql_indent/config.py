"""
Style configuration

The four presentation styles are a data table: every style is a fixed
combination of indent unit, default keyword case, comma placement and clause
head layout. No other combinations are exposed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class FormatStyle(Enum):
    """Available formatting styles"""
    BASIC = "basic"
    STREAMLINE = "streamline"
    ALIGNED = "aligned"
    DATAOPS = "dataops"


@dataclass(frozen=True)
class StyleSpec:
    """Layout axes of one style"""
    indent: int
    uppercase: bool
    leading_commas: bool
    aligned: bool = False


# Width of the keyword column in the aligned style (len("SELECT"))
RIVER_WIDTH = 6

# Join keywords end at this column in the aligned style: " INNER JOIN"
JOIN_RIVER_WIDTH = 11

STYLES: Dict[FormatStyle, StyleSpec] = {
    FormatStyle.BASIC: StyleSpec(indent=4, uppercase=True, leading_commas=False),
    FormatStyle.STREAMLINE: StyleSpec(indent=2, uppercase=False, leading_commas=False),
    FormatStyle.ALIGNED: StyleSpec(indent=RIVER_WIDTH + 1, uppercase=True,
                                   leading_commas=True, aligned=True),
    FormatStyle.DATAOPS: StyleSpec(indent=4, uppercase=True, leading_commas=True),
}

# Display names for embedding hosts (dropdowns, help text)
SQL_FORMAT_STYLES = {
    'basic': {
        'name': 'Basic',
        'description': 'Clause keywords on their own line, items indented 4 spaces, trailing commas'
    },
    'streamline': {
        'name': 'Streamline',
        'description': 'Same shape as Basic with a 2 space indent and lowercase keywords'
    },
    'aligned': {
        'name': 'Aligned',
        'description': 'Keywords right-aligned on a river, leading commas under the first item'
    },
    'dataops': {
        'name': 'DataOps',
        'description': 'Same shape as Basic with leading commas'
    },
}

# Style names from the earlier two-style scheme
_SUPERSEDED_STYLES = {
    'standard': 'basic',
    'river': 'aligned',
}


class UnknownStyleError(ValueError):
    """Raised when a style name is not one of the available styles"""

    def __init__(self, style_name: str):
        self.style_name = style_name
        valid = ", ".join(style.value for style in FormatStyle)
        message = f"Unknown style '{style_name}' (valid styles: {valid})"
        replacement = _SUPERSEDED_STYLES.get(str(style_name).lower())
        if replacement:
            message += f"; '{style_name}' was renamed to '{replacement}'"
        super().__init__(message)


def parse_style(style_name) -> FormatStyle:
    """
    Resolve a style name (case-insensitive) or FormatStyle member.

    Raises:
        UnknownStyleError: If the name is not a known style
    """
    if isinstance(style_name, FormatStyle):
        return style_name
    try:
        return FormatStyle(str(style_name).strip().lower())
    except ValueError:
        raise UnknownStyleError(style_name) from None


@dataclass(frozen=True)
class StyleConfig:
    """Immutable (style, keyword case) pair for one formatting call"""
    style: FormatStyle = FormatStyle.BASIC
    uppercase: bool = True

    @classmethod
    def create(cls, style_name="basic", uppercase: Optional[bool] = None) -> "StyleConfig":
        """
        Build a configuration.

        Args:
            style_name: Style name or FormatStyle
            uppercase: Keyword case; None uses the style's default case

        Raises:
            UnknownStyleError: If the style name is not recognized
        """
        style = parse_style(style_name)
        if uppercase is None:
            uppercase = STYLES[style].uppercase
        return cls(style=style, uppercase=uppercase)

    @property
    def spec(self) -> StyleSpec:
        return STYLES[self.style]

from .alpha import AlphaColor, alpha_scale, backdrop_for, solve_alpha_color
from .analyze import (
    Anchor,
    AnalysisReport,
    ColorAnalysis,
    CustomRowInfo,
    SlotTuning,
    TuningProfile,
    analysis_report,
    analyze,
    analyze_color,
)
from .apca import contrast
from .color import Color, canonical_hex, parse_color, to_css, to_hex, validate_color
from .errors import (
    BrandscaleError,
    ConfigError,
    EmptyInput,
    InvalidColor,
    InvalidMode,
    TooManyInputs,
)
from .generate import APCA_THRESHOLDS, ContrastShortfall, CustomHue, Scale, generate_scale
from .hues import BASELINE_HUES, HUE_COUNT, HUE_KEYS, HueDefinition, find_closest_hue
from .palette import Palette, PaletteStats, Theme, generate_palette, generate_theme
from .validate import ContrastIssue, ContrastReport, format_report, is_accessible, validate_contrast

__version__ = "0.1.0"

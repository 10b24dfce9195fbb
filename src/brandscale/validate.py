from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .apca import contrast
from .generate import APCA_THRESHOLDS, BACKGROUND_STEPS, SOLID_STEP, TEXT_STEPS, WHITE
from .palette import Palette, Theme

USE_CASES = {
    APCA_THRESHOLDS["body"]: "body text",
    APCA_THRESHOLDS["large"]: "large text",
    APCA_THRESHOLDS["decorative"]: "decorative",
}

CHECK_COLUMNS = [
    "hue",
    "mode",
    "text_step",
    "bg_step",
    "use_case",
    "expected",
    "actual",
    "severity",
    "passed",
]


@dataclass(frozen=True)
class ContrastIssue:
    hue: str
    mode: str
    text_step: int
    bg_step: Union[int, str]
    use_case: str
    expected: float
    actual: float
    severity: str

    def describe(self) -> str:
        bg = "white text" if self.bg_step == "white" else f"step {self.bg_step}"
        if self.bg_step == "white":
            pair = f"{bg} on step {self.text_step}"
        else:
            pair = f"step {self.text_step} on {bg}"
        return (
            f"{self.hue} ({self.mode}): {pair} Lc {self.actual:.1f} "
            f"< {self.expected:.0f} ({self.use_case})"
        )


@dataclass(frozen=True, eq=False)
class ContrastReport:
    checks: pd.DataFrame
    issues: Tuple[ContrastIssue, ...]

    @property
    def total_checks(self) -> int:
        return int(len(self.checks))

    @property
    def passed_checks(self) -> int:
        return int(self.checks["passed"].sum()) if len(self.checks) else 0

    @property
    def passed(self) -> bool:
        return not any(i.severity == "fail" for i in self.issues)

    @property
    def errors(self) -> List[ContrastIssue]:
        return [i for i in self.issues if i.severity == "fail"]

    @property
    def warnings(self) -> List[ContrastIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def _summary(self, by: str) -> pd.DataFrame:
        if not len(self.checks):
            return pd.DataFrame(columns=["checks", "passed", "failed", "warnings"])
        df = self.checks.assign(
            failed=(~self.checks["passed"]) & (self.checks["severity"] == "fail"),
            warned=(~self.checks["passed"]) & (self.checks["severity"] == "warning"),
        )
        return (
            df.groupby(by, sort=False)
            .agg(
                checks=("passed", "size"),
                passed=("passed", "sum"),
                failed=("failed", "sum"),
                warnings=("warned", "sum"),
            )
            .astype(int)
        )

    @property
    def summary_by_hue(self) -> pd.DataFrame:
        return self._summary("hue")

    @property
    def summary_by_mode(self) -> pd.DataFrame:
        return self._summary("mode")

    def to_frame(self) -> pd.DataFrame:
        return self.checks.copy()


def _palettes(target: Union[Palette, Theme, Iterable[Palette]]) -> List[Palette]:
    if isinstance(target, Palette):
        return [target]
    if isinstance(target, Theme):
        return list(target.palettes)
    return list(target)


def validate_contrast(
    target: Union[Palette, Theme, Sequence[Palette]],
    hues: Optional[Iterable[str]] = None,
    errors_only: bool = False,
) -> ContrastReport:
    """
    Audit one palette, a theme, or a list of palettes.

    ``hues`` restricts the audit to those scale keys (or one key). ``errors_only`` skips
    the white-text warning checks.
    """
    if isinstance(hues, str):
        hues = (hues,)
    wanted = set(hues) if hues is not None else None
    rows = []
    issues: List[ContrastIssue] = []

    def record(hue, mode, text_step, bg_step, expected, lc, severity):
        actual = round(abs(lc), 1)
        ok = abs(lc) >= expected
        rows.append(
            (hue, mode, text_step, bg_step, USE_CASES[expected], expected, actual, severity, ok)
        )
        if not ok:
            issues.append(
                ContrastIssue(
                    hue, mode, text_step, bg_step, USE_CASES[expected], expected, actual, severity
                )
            )

    for palette in _palettes(target):
        for scale in palette.scales:
            if wanted is not None and scale.key not in wanted:
                continue
            for text_step, threshold in TEXT_STEPS.items():
                for bg_step in BACKGROUND_STEPS:
                    lc = contrast(scale[text_step], scale[bg_step])
                    record(scale.key, palette.mode, text_step, bg_step, threshold, lc, "fail")
            if not errors_only:
                lc = contrast(WHITE, scale[SOLID_STEP])
                record(
                    scale.key, palette.mode, SOLID_STEP, "white",
                    APCA_THRESHOLDS["large"], lc, "warning",
                )

    checks = pd.DataFrame(rows, columns=CHECK_COLUMNS)
    return ContrastReport(checks=checks, issues=tuple(issues))


def is_accessible(target: Union[Palette, Theme]) -> bool:
    return validate_contrast(target, errors_only=True).passed


def format_report(report: ContrastReport) -> str:
    lines = [
        f"Contrast: {report.passed_checks}/{report.total_checks} checks passed",
    ]
    if report.errors:
        lines.append("")
        lines.append(f"Errors ({len(report.errors)}):")
        lines.extend(f"  ✗ {i.describe()}" for i in report.errors)
    if report.warnings:
        lines.append("")
        lines.append(f"Warnings ({len(report.warnings)}):")
        lines.extend(f"  ! {i.describe()}" for i in report.warnings)
    if not report.issues:
        lines.append("✓ All checks passed")

    if report.total_checks:
        lines.append("")
        lines.append("By mode:")
        for mode, row in report.summary_by_mode.iterrows():
            lines.append(
                f"  {mode}: {row['passed']}/{row['checks']} passed, "
                f"{row['failed']} failed, {row['warnings']} warnings"
            )
    return "\n".join(lines)

"""Weekly progress report for the family group chat."""

from __future__ import annotations

from typing import List, Mapping

from ..core.time import ms_to_datetime
from ..models import ProgressRecord
from .activity import ActivitySummary, summarize

REPORT_BEHIND_LIMIT = 5
_MEDALS = ("\U0001f947", "\U0001f948", "\U0001f949")
_RULE = "═" * 23


def format_report_date(now: int) -> str:
    moment = ms_to_datetime(now)
    return f"{moment:%A, %B} {moment.day}, {moment.year}"


def render_report(summary: ActivitySummary) -> str:
    lines: List[str] = [
        "\U0001f4d6 *Noor Journey - Weekly Progress Report*",
        f"\U0001f5d3️ {format_report_date(summary.generated_at)}",
        "",
        _RULE,
        "",
        "\U0001f3c6 *TOP PERFORMERS* \U0001f31f",
        "",
    ]
    for index, entry in enumerate(summary.top_performers):
        position = entry.position
        lines.append(f"{_MEDALS[index]} *{entry.member}*")
        lines.append(f"   └ {position.juz} Juz | Surah {position.surah}, Ayah {position.ayah}")
        lines.append("")

    lines.append("")
    lines.append(f"✅ *ACTIVE THIS WEEK* ({len(summary.active)} members)")
    lines.append("")
    for status in summary.active:
        if status.days_since_update <= 0:
            note = "\U0001f4cd Updated today"
        else:
            note = f"\U0001f4c5 {status.days_since_update}d ago"
        lines.append(f"• {status.member} - {note}")

    if summary.inactive:
        lines.extend(["", ""])
        lines.append(f"⚠️ *NEEDS ENCOURAGEMENT* ({len(summary.inactive)} members)")
        lines.append("")
        for status in summary.inactive:
            lines.append(f"• {status.member} - {status.days_since_update} days inactive")

    if summary.behind:
        lines.extend(["", ""])
        lines.append("\U0001f4da *BEHIND IN PROGRESS*")
        lines.append("")
        for status in summary.behind[:REPORT_BEHIND_LIMIT]:
            lines.append(f"• {status.member} - {status.position.juz} Juz completed")

    lines.extend(["", "", _RULE])
    lines.append("\U0001f4a1 *Keep going! Every ayah counts!*")
    lines.append("\U0001f932 May Allah make it easy for all of us.")
    return "\n".join(lines)


def build_weekly_report(records: Mapping[str, ProgressRecord], now: int) -> str:
    """Render the report from one point-in-time snapshot."""
    return render_report(summarize(records, now))


__all__ = ["REPORT_BEHIND_LIMIT", "build_weekly_report", "format_report_date", "render_report"]

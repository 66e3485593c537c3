from __future__ import annotations  # Styled PDF rendering for performance reports

import os
import re
from datetime import datetime
from typing import Any, List, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from storage.responses import InterviewResponse

from .models import PerformanceReport


DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color

TYPE_LABELS = {
    "technical1": "Technical (Coding & Bug Fixes)",
    "technical2": "Simulation (Scenario Analysis)",
    "behavioural": "Behavioural (Workplace Scenarios)",
}


def _parse_datetime(value: str | None) -> datetime | None:  # Parse ISO timestamp safely
    if not value:
        return None
    try:
        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _format_datetime(value: datetime | None) -> str:  # Format timestamp for display
    if not value:
        return "-"
    return value.strftime("%d %b %Y, %I:%M %p").lstrip("0").replace(" 0", " ")


def _format_duration(seconds: int) -> str:  # Render seconds as minutes and seconds
    minutes, rest = divmod(max(0, int(seconds)), 60)
    if minutes:
        return f"{minutes}m {rest:02d}s"
    return f"{rest}s"


def _effective_width(pdf: FPDF) -> float:  # Compute effective page width
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


def _section_title(pdf: ReportPDF, title: str) -> None:  # Render styled section title
    pdf.set_text_color(*TEXT)
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf.font_bold, "B", 13)
    pdf.cell(0, 9, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)


def _meta_block(pdf: ReportPDF, rows: List[Tuple[str, str]]) -> None:  # Draw two-column metadata
    col = _effective_width(pdf) / 2.0
    line = 6
    for idx in range(0, len(rows), 2):
        left = rows[idx]
        right = rows[idx + 1] if idx + 1 < len(rows) else ("", "")
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf.font_regular, "", 10)
        pdf.cell(col, line, left[0], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, right[0], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf.font_bold, "B", 11)
        pdf.cell(col, line, left[1], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, right[1], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


class ReportPDF(FPDF):  # PDF with custom header/footer styling
    def __init__(self, *args, accent: Tuple[int, int, int] = ACCENT, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.accent = accent
        self.header_title = "Interview Performance Report"
        self.font_regular = "Helvetica"
        self.font_bold = "Helvetica"
        self.supports_unicode = False

    def use_unicode_fonts(self) -> None:  # Switch to DejaVu when the system provides it
        if not (os.path.exists(DEJAVU_SANS) and os.path.exists(DEJAVU_SANS_BOLD)):
            return
        self.add_font("DejaVu", "", DEJAVU_SANS)
        self.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        self.font_regular = "DejaVu"
        self.font_bold = "DejaVu"
        self.supports_unicode = True

    def prepare_text(self, text: Any) -> str:  # Sanitize text for non-unicode fonts
        value = "" if text is None else str(text)
        if self.supports_unicode:
            return value
        cleaned = value.replace("•", "-").replace("’", "'").replace("“", '"').replace("”", '"')
        return cleaned.encode("latin-1", "ignore").decode("latin-1")

    def cell(self, *args, **kwargs):  # Wrap base cell with text sanitisation
        args_list = list(args)
        if len(args_list) >= 3:
            args_list[2] = self.prepare_text(args_list[2])
        elif "text" in kwargs:
            kwargs["text"] = self.prepare_text(kwargs["text"])
        return super().cell(*args_list, **kwargs)

    def multi_cell(self, *args, **kwargs):  # Wrap base multi_cell with text sanitisation
        args_list = list(args)
        if len(args_list) >= 3:
            args_list[2] = self.prepare_text(args_list[2])
        elif "text" in kwargs:
            kwargs["text"] = self.prepare_text(kwargs["text"])
        return super().multi_cell(*args_list, **kwargs)

    def header(self) -> None:  # Render header banner
        usable = _effective_width(self)
        if self.page_no() == 1:
            banner = 22
            self.set_fill_color(*self.accent)
            self.rect(0, 0, self.w, banner, style="F")
            self.set_text_color(255, 255, 255)
            self.set_font(self.font_bold, "B", 16)
            self.set_xy(self.l_margin, 7)
            self.cell(usable, 8, self.header_title)
            self.set_y(banner + 4)
        else:
            self.set_text_color(80, 80, 80)
            self.set_xy(self.l_margin, 8)
            self.set_font(self.font_bold, "B", 12)
            self.cell(usable, 6, self.header_title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            mark = self.get_y()
            self.set_draw_color(*self.accent)
            self.set_line_width(0.4)
            self.line(self.l_margin, mark + 1, self.w - self.r_margin, mark + 1)
            self.ln(4)
        self.set_text_color(*TEXT)

    def footer(self) -> None:  # Render footer with pagination
        self.set_y(-12)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(120, 120, 120)
        self.set_font(self.font_regular, "", 9)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")


def _render_breakdown(pdf: ReportPDF, report: PerformanceReport) -> None:  # Draw per-type count table
    stats = report.analysis.stats
    rows = [
        (TYPE_LABELS["technical1"], stats.technical1_count),
        (TYPE_LABELS["technical2"], stats.technical2_count),
        (TYPE_LABELS["behavioural"], stats.behavioural_count),
    ]
    widths = [_effective_width(pdf) * 0.75, _effective_width(pdf) * 0.25]
    pdf.set_x(pdf.l_margin)
    pdf.set_fill_color(*ACCENT)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(pdf.font_bold, "B", 10)
    pdf.cell(widths[0], 8, "Section", fill=True)
    pdf.cell(widths[1], 8, "Responses", align="C", fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf.font_regular, "", 10)
    for idx, (label, count) in enumerate(rows):
        fill = idx % 2 == 0
        if fill:
            pdf.set_fill_color(247, 250, 255)
        pdf.set_x(pdf.l_margin)
        pdf.cell(widths[0], 7, label, fill=fill)
        pdf.cell(widths[1], 7, str(count), align="C", fill=fill, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


_BOLD_MARKERS = re.compile(r"\*\*(.+?)\*\*")


def _render_feedback(pdf: ReportPDF, feedback: str) -> None:  # Render markdown-ish feedback text
    width = _effective_width(pdf)
    bullet = "•" if pdf.supports_unicode else "-"
    for raw in feedback.splitlines():
        line = _BOLD_MARKERS.sub(r"\1", raw.rstrip())
        stripped = line.strip()
        pdf.set_x(pdf.l_margin)
        if not stripped:
            pdf.ln(2)
            continue
        if stripped.startswith("#"):
            pdf.ln(1)
            pdf.set_text_color(*ACCENT)
            pdf.set_font(pdf.font_bold, "B", 12)
            pdf.multi_cell(width, 7, stripped.lstrip("#").strip(), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.set_text_color(*TEXT)
            continue
        pdf.set_font(pdf.font_regular, "", 11)
        if stripped.startswith(("- ", "* ")):
            pdf.set_x(pdf.l_margin + 4)
            pdf.multi_cell(width - 4, 6, f"{bullet} {stripped[2:]}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            continue
        pdf.multi_cell(width, 6, stripped, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


def _render_responses(pdf: ReportPDF, responses: Sequence[InterviewResponse]) -> None:  # List submitted tasks
    width = _effective_width(pdf)
    for entry in responses:
        pdf.set_x(pdf.l_margin)
        pdf.set_font(pdf.font_bold, "B", 10)
        pdf.set_text_color(*TEXT)
        pdf.multi_cell(width, 6, entry.task_title or "Untitled task", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font(pdf.font_regular, "", 9)
        pdf.set_text_color(*MUTED)
        label = TYPE_LABELS.get(entry.interview_type, entry.interview_type)
        pdf.multi_cell(
            width,
            5,
            f"{label} | {_format_duration(entry.time_spent_seconds)} | {_format_datetime(_parse_datetime(entry.created_at))}",
            new_x=XPos.LMARGIN,
            new_y=YPos.NEXT,
        )
        pdf.ln(1)
    pdf.set_text_color(*TEXT)


def generate_performance_report_pdf(report: PerformanceReport) -> bytes:  # Build PDF payload for a performance report
    pdf = ReportPDF()
    pdf.use_unicode_fonts()
    pdf.header_title = f"Interview Performance Report - {report.candidate_email}"
    pdf.set_margins(15, 22, 15)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    stats = report.analysis.stats
    _section_title(pdf, "Overview")
    _meta_block(
        pdf,
        [
            ("Candidate", report.candidate_email),
            ("Generated", _format_datetime(_parse_datetime(report.generated_at))),
            ("Total Responses", str(stats.total_responses)),
            ("Total Time Spent", _format_duration(stats.total_time_spent)),
        ],
    )

    _section_title(pdf, "Response Breakdown")
    _render_breakdown(pdf, report)

    _section_title(pdf, "Feedback")
    _render_feedback(pdf, report.analysis.feedback)

    _section_title(pdf, "Submitted Tasks")
    _render_responses(pdf, report.responses)

    return bytes(pdf.output())


__all__ = ["ReportPDF", "generate_performance_report_pdf"]

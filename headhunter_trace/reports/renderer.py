"""PDF investigation report.

Lays out a subject query and its SearchData onto A4 pages: title band,
metadata, executive summary, one card per result, a running page footer and a
legal disclaimer on the last page. Everything is positioned with a vertical
cursor (mm); a block that would cross ``CONTENT_BOTTOM`` moves to a new page.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from fpdf import FPDF
from pydantic import ValidationError

from headhunter_trace.reports.exceptions import ReportInputError
from headhunter_trace.searches.schemas import (
    ExposureLevel,
    ProfileResult,
    SearchData,
    confidence_percent,
)

logger = logging.getLogger(__name__)

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN = 20.0
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
CONTENT_BOTTOM = 270.0
DISCLAIMER_TOP = PAGE_HEIGHT - 35
LINE_HEIGHT = 5.0

BACKGROUND = (15, 23, 42)
ACCENT = (20, 184, 166)
CARD = (30, 41, 59)
CARD_HEADER = (51, 65, 85)
WHITE = (255, 255, 255)
LIGHT = (200, 200, 200)
MUTED = (150, 150, 150)
LINK = (100, 150, 200)
FOOTER = (100, 100, 100)

EXPOSURE_COLORS = {
    ExposureLevel.LOW: (34, 197, 94),
    ExposureLevel.MEDIUM: (234, 179, 8),
    ExposureLevel.HIGH: (239, 68, 68),
}

DISCLAIMER = (
    "DISCLAIMER: This report contains information gathered from publicly available sources only. All data is fictional",
    "and for demonstration purposes. {product} does not access private or legally restricted information.",
)

# Core PDF fonts only cover latin-1
_PUNCTUATION = str.maketrans({
    "\u2018": "'", "\u2019": "'", "\u201c": '"', "\u201d": '"',
    "\u2013": "-", "\u2014": "-", "\u2026": "...", "\u2022": "-",
})


def pdf_safe(text: Any) -> str:
    return str(text).translate(_PUNCTUATION).encode("latin-1", "replace").decode("latin-1")


def to_base36(value: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


@dataclass
class RenderedReport:
    """A finished PDF and what went into it."""

    content: bytes
    filename: str
    report_id: str
    generated_at: datetime
    page_count: int
    cards_rendered: int


class _ReportDocument(FPDF):
    """FPDF with a painted background and the report footer."""

    def __init__(self, product_name: str) -> None:
        super().__init__(orientation="P", unit="mm", format="A4")
        self.product_name = product_name
        self.set_auto_page_break(False)
        self.set_margins(MARGIN, MARGIN, MARGIN)
        self.cursor = MARGIN
        self.closing = False

    def header(self) -> None:
        self.set_fill_color(*BACKGROUND)
        self.rect(0, 0, PAGE_WIDTH, PAGE_HEIGHT, "F")

    def footer(self) -> None:
        if self.closing:
            self._disclaimer()
        self.set_font("helvetica", "", 8)
        self.set_text_color(*FOOTER)
        self.centered(
            f"{self.product_name} - Confidential Report | Page {self.page_no()} of {{nb}}",
            PAGE_HEIGHT - 10,
        )

    def _disclaimer(self) -> None:
        self.set_fill_color(*CARD)
        self.rect(0, DISCLAIMER_TOP - 5, PAGE_WIDTH, 25, "F")
        self.set_font("helvetica", "", 7)
        self.set_text_color(120, 120, 120)
        for offset, line in enumerate(DISCLAIMER):
            self.centered(line.format(product=self.product_name), DISCLAIMER_TOP + offset * 4)

    # -- primitives ---------------------------------------------------------

    def centered(self, text: str, y: float) -> None:
        text = pdf_safe(text)
        self.text((PAGE_WIDTH - self.get_string_width(text)) / 2, y, text)

    def ensure_space(self, height: float) -> None:
        if self.cursor + height > CONTENT_BOTTOM:
            self.add_page()
            self.cursor = MARGIN

    def use_font(self, size: float, bold: bool = False, color: tuple[int, int, int] = WHITE) -> None:
        self.set_font("helvetica", "B" if bold else "", size)
        self.set_text_color(*color)

    def write_line(self, text: str, size: float, bold: bool = False, color: tuple[int, int, int] = WHITE) -> None:
        advance = size * 0.5
        self.ensure_space(advance)
        self.use_font(size, bold, color)
        self.text(MARGIN, self.cursor, pdf_safe(text))
        self.cursor += advance

    def write_wrapped(self, text: str, size: float, color: tuple[int, int, int]) -> int:
        """Write word-wrapped text, breaking pages between lines as needed."""
        self.use_font(size, color=color)
        lines = self.wrap(text, CONTENT_WIDTH)
        for line in lines:
            if self.cursor + LINE_HEIGHT > CONTENT_BOTTOM:
                self.add_page()
                self.cursor = MARGIN
                self.use_font(size, color=color)
            self.text(MARGIN, self.cursor, line)
            self.cursor += LINE_HEIGHT
        return len(lines)

    def wrap(self, text: str, width: float) -> list[str]:
        """Greedy word wrap with the current font; overlong words are split."""
        lines: list[str] = []
        for paragraph in pdf_safe(text).split("\n"):
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}" if current else word
                if self.get_string_width(candidate) <= width:
                    current = candidate
                    continue
                if current:
                    lines.append(current)
                current = ""
                while self.get_string_width(word) > width:
                    cut = len(word)
                    while cut > 1 and self.get_string_width(word[:cut]) > width:
                        cut -= 1
                    lines.append(word[:cut])
                    word = word[cut:]
                current = word
            lines.append(current)
        return lines

    def truncate(self, text: str, width: float) -> str:
        text = pdf_safe(text)
        if self.get_string_width(text) <= width:
            return text
        while text and self.get_string_width(text + "...") > width:
            text = text[:-1]
        return text + "..."

    def rule(self) -> None:
        self.set_draw_color(50, 150, 150)
        self.line(MARGIN, self.cursor, PAGE_WIDTH - MARGIN, self.cursor)
        self.cursor += 5


class ReportRenderer:
    """Renders SearchData into a downloadable PDF report."""

    SUBTITLE = "Digital Footprint Investigation Report"

    def __init__(self, product_name: str = "Headhunter Trace", compress: bool = True) -> None:
        self._product_name = product_name
        self._compress = compress

    def render(
        self,
        query: str,
        data: SearchData | Mapping[str, Any],
        now: datetime | None = None,
    ) -> RenderedReport:
        """Render a report.

        Args:
            query: Subject of the search, echoed in the report and filename
            data: SearchData or its raw mapping (results may be empty)
            now: Generation time, defaults to the current local time

        Raises:
            ReportInputError: ``query`` or ``data`` is malformed; nothing is drawn
        """
        data = self._validate(query, data)
        now = now or datetime.now().astimezone()
        millis = int(now.timestamp() * 1000)
        report_id = f"HT-{to_base36(millis).upper()}"

        doc = _ReportDocument(self._product_name)
        doc.set_compression(self._compress)
        doc.set_creation_date(now)
        doc.set_title(pdf_safe(f"{self._product_name} Report - {query}"))
        doc.add_page()

        self._title_band(doc)
        self._metadata(doc, query, now, report_id)
        self._summary(doc, data)
        cards = self._findings(doc, data.results)

        if doc.cursor > DISCLAIMER_TOP - 5:
            doc.add_page()
            doc.cursor = MARGIN
        page_count = doc.page_no()
        doc.closing = True
        content = bytes(doc.output())

        logger.info(f"Rendered report {report_id}: {cards} results on {page_count} pages")
        return RenderedReport(
            content=content,
            filename=self.filename(query, millis),
            report_id=report_id,
            generated_at=now,
            page_count=page_count,
            cards_rendered=cards,
        )

    def filename(self, query: str, millis: int) -> str:
        subject = re.sub(r"\s+", "_", query.strip())
        subject = re.sub(r"[\\/]", "_", subject)
        return f"{self._product_name.replace(' ', '')}_Report_{subject}_{millis}.pdf"

    @staticmethod
    def _validate(query: Any, data: Any) -> SearchData:
        if not isinstance(query, str):
            raise ReportInputError("query must be a string")
        if isinstance(data, SearchData):
            # Models are mutable, so validate the current field values again.
            data = data.model_dump()
        if not isinstance(data, Mapping):
            raise ReportInputError("search data must be a mapping")
        for key in ("results", "summary"):
            if data.get(key) is None:
                raise ReportInputError(f"search data is missing '{key}'")
        try:
            return SearchData.model_validate(data)
        except ValidationError as e:
            raise ReportInputError(f"search data is invalid ({e.error_count()} errors)") from e

    # -- sections -----------------------------------------------------------

    def _title_band(self, doc: _ReportDocument) -> None:
        doc.set_fill_color(*ACCENT)
        doc.rect(0, 0, PAGE_WIDTH, 40, "F")
        doc.use_font(24, bold=True)
        doc.text(MARGIN, 25, pdf_safe(self._product_name.upper()))
        doc.use_font(12)
        doc.text(MARGIN, 33, self.SUBTITLE)
        doc.cursor = 55

    def _metadata(self, doc: _ReportDocument, query: str, now: datetime, report_id: str) -> None:
        doc.write_line(f"Subject: {query}", 14, bold=True)
        doc.cursor += 5
        doc.write_line(f"Generated: {now.strftime('%m/%d/%Y, %I:%M:%S %p')}", 10, color=MUTED)
        doc.write_line(f"Report ID: {report_id}", 10, color=MUTED)
        doc.cursor += 10
        doc.rule()
        doc.cursor += 5

    def _summary(self, doc: _ReportDocument, data: SearchData) -> None:
        summary = data.summary
        doc.write_line("EXECUTIVE SUMMARY", 16, bold=True, color=ACCENT)
        doc.cursor += 5
        doc.write_line(
            f"Digital Exposure Level: {summary.exposure_level.value.upper()}",
            12,
            bold=True,
            color=EXPOSURE_COLORS[summary.exposure_level],
        )
        doc.cursor += 3
        doc.write_line(f"Total Profiles Identified: {summary.total_found}", 11)
        doc.write_line(f"Platforms Detected: {len(summary.platforms_found)}", 11)
        doc.cursor += 5

        doc.write_line("Platforms Found:", 11, bold=True)
        doc.cursor += 2
        doc.write_wrapped(", ".join(summary.platforms_found), 10, LIGHT)
        doc.cursor += 5

        doc.write_line("Key Insights:", 11, bold=True)
        doc.cursor += 2
        for index, insight in enumerate(summary.key_insights, start=1):
            doc.write_wrapped(f"{index}. {insight}", 10, LIGHT)
            doc.cursor += 2

        doc.cursor += 10
        doc.rule()
        doc.cursor += 10

    def _findings(self, doc: _ReportDocument, results: list[ProfileResult]) -> int:
        doc.write_line("DETAILED FINDINGS", 16, bold=True, color=ACCENT)
        doc.cursor += 10
        if not results:
            doc.write_line("No public profiles were identified for this subject.", 10, color=MUTED)
            return 0

        for index, result in enumerate(results, start=1):
            self._card(doc, index, result)
        return len(results)

    def _card(self, doc: _ReportDocument, index: int, result: ProfileResult) -> None:
        doc.use_font(10)
        bio_lines = doc.wrap(f"Bio: {result.bio}", CONTENT_WIDTH)[:2] if result.bio else []
        stats = []
        if result.followers_count > 0:
            stats.append(f"Followers: {result.followers_count:,}")
        if result.posts_count > 0:
            stats.append(f"Posts: {result.posts_count:,}")

        body = 15 + 6 + LINE_HEIGHT * len(bio_lines) + LINE_HEIGHT
        if result.location:
            body += LINE_HEIGHT
        if stats:
            body += LINE_HEIGHT
        height = body + 2

        # Cards are never split across pages
        if doc.cursor - 5 + height > CONTENT_BOTTOM:
            doc.add_page()
            doc.cursor = MARGIN + 5
        top = doc.cursor - 5

        doc.set_fill_color(*CARD)
        doc.rect(MARGIN - 5, top, CONTENT_WIDTH + 10, height, "F")
        doc.set_fill_color(*CARD_HEADER)
        doc.rect(MARGIN - 5, top, CONTENT_WIDTH + 10, 12, "F")

        doc.use_font(11, bold=True, color=ACCENT)
        doc.text(MARGIN, doc.cursor + 3, pdf_safe(f"{index}. {result.platform.upper()}"))
        doc.use_font(9, color=LIGHT)
        confidence = f"Confidence: {confidence_percent(result.confidence_score)}%"
        doc.text(PAGE_WIDTH - MARGIN - doc.get_string_width(confidence), doc.cursor + 3, confidence)
        doc.cursor += 15

        doc.use_font(10, bold=True)
        doc.text(MARGIN, doc.cursor, doc.truncate(f"{result.display_name} (@{result.username})", CONTENT_WIDTH))
        doc.cursor += 6

        if bio_lines:
            doc.use_font(10, color=(180, 180, 180))
            for line in bio_lines:
                doc.text(MARGIN, doc.cursor, line)
                doc.cursor += LINE_HEIGHT

        doc.use_font(10, color=MUTED)
        if result.location:
            doc.text(MARGIN, doc.cursor, doc.truncate(f"Location: {result.location}", CONTENT_WIDTH))
            doc.cursor += LINE_HEIGHT
        if stats:
            doc.text(MARGIN, doc.cursor, " | ".join(stats))
            doc.cursor += LINE_HEIGHT

        doc.use_font(10, color=LINK)
        label = doc.truncate(f"URL: {result.profile_url}", CONTENT_WIDTH)
        doc.text(MARGIN, doc.cursor, label)
        doc.link(MARGIN, doc.cursor - 4, doc.get_string_width(label), LINE_HEIGHT, result.profile_url)

        doc.cursor = top + height + 13


def render_report(
    query: str,
    data: SearchData | Mapping[str, Any],
    now: datetime | None = None,
    product_name: str = "Headhunter Trace",
) -> RenderedReport:
    """Render a report with the default renderer."""
    return ReportRenderer(product_name=product_name).render(query, data, now=now)


def save_report(report: RenderedReport, directory: str | Path = ".") -> Path:
    """Write a rendered report under its generated filename."""
    path = Path(directory) / report.filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(report.content)
    return path

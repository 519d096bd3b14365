import io
import re
from datetime import datetime, timezone

import pytest
from pypdf import PdfReader

from headhunter_trace.reports.exceptions import ReportInputError
from headhunter_trace.reports.renderer import (
    ReportRenderer,
    pdf_safe,
    render_report,
    save_report,
    to_base36,
)

NOW = datetime(2026, 3, 14, 9, 26, 53, tzinfo=timezone.utc)
MILLIS = int(NOW.timestamp() * 1000)


@pytest.fixture
def renderer():
    """Uncompressed output keeps the page text inspectable."""
    return ReportRenderer(compress=False)


def page_texts(content: bytes) -> list[str]:
    reader = PdfReader(io.BytesIO(content))
    return [page.extract_text() for page in reader.pages]


def test_report_has_one_card_per_result(renderer, make_search_data):
    report = renderer.render("Jane Doe", make_search_data(4), now=NOW)

    text = "\n".join(page_texts(report.content))
    assert report.cards_rendered == 4
    assert text.count("Confidence:") == 4
    assert "Confidence: 80%" in text
    assert "Followers: 1,200 | Posts: 34" in text
    assert "EXECUTIVE SUMMARY" in text
    assert "Digital Exposure Level: MEDIUM" in text


def test_report_without_results(renderer, make_search_data):
    report = renderer.render("Nobody Known", make_search_data(0), now=NOW)

    text = "\n".join(page_texts(report.content))
    assert report.cards_rendered == 0
    assert report.page_count == 1
    assert "Confidence:" not in text
    assert "No public profiles were identified for this subject." in text


def test_every_page_has_numbered_footer(renderer, make_search_data):
    report = renderer.render("Jane Doe", make_search_data(30), now=NOW)

    texts = page_texts(report.content)
    assert report.page_count > 1
    assert len(texts) == report.page_count
    for number, text in enumerate(texts, start=1):
        assert re.search(rf"Page\s*{number}\s*of\s*{report.page_count}", text)
        assert "Confidential Report" in text


def test_disclaimer_only_on_last_page(renderer, make_search_data):
    report = renderer.render("Jane Doe", make_search_data(30), now=NOW)

    texts = page_texts(report.content)
    assert "DISCLAIMER" in texts[-1]
    assert all("DISCLAIMER" not in text for text in texts[:-1])


def test_long_insights_flow_onto_new_pages(renderer, make_search_data):
    insights = ["Reused handle across forums and code hosting sites. " * 6] * 25
    report = renderer.render("Jane Doe", make_search_data(0, key_insights=insights), now=NOW)

    assert report.page_count > 1
    assert len(page_texts(report.content)) == report.page_count


@pytest.mark.parametrize("score, label", [(1.7, "Confidence: 100%"), (-0.3, "Confidence: 0%")])
def test_confidence_is_clamped(renderer, make_search_data, score, label):
    data = make_search_data(1)
    data.results[0].confidence_score = score

    report = renderer.render("Jane Doe", data, now=NOW)

    assert label in "\n".join(page_texts(report.content))


def test_report_identity_follows_generation_time(renderer, make_search_data):
    report = renderer.render("Jane  Doe", make_search_data(1), now=NOW)

    assert report.report_id == f"HT-{to_base36(MILLIS).upper()}"
    assert report.filename == f"HeadhunterTrace_Report_Jane_Doe_{MILLIS}.pdf"
    assert report.generated_at == NOW
    assert report.report_id in page_texts(report.content)[0]


def test_filename_replaces_path_separators(renderer):
    assert renderer.filename("a/b\\c d", 42) == "HeadhunterTrace_Report_a_b_c_d_42.pdf"


def test_rendering_is_deterministic(make_search_data):
    data = make_search_data(3)

    first = render_report("Jane Doe", data, now=NOW)
    second = render_report("Jane Doe", data, now=NOW)

    assert first.content == second.content


def test_render_accepts_raw_mapping(renderer, make_search_data):
    raw = make_search_data(2).model_dump(mode="json")

    report = renderer.render("Jane Doe", raw, now=NOW)

    assert report.cards_rendered == 2


def test_render_handles_non_latin_text(renderer, make_search_data):
    data = make_search_data(1)
    data.results[0].bio = "Says “hello” — café owner 你好"

    report = renderer.render("José “Pepe” Núñez", data, now=NOW)

    assert report.content.startswith(b"%PDF")


@pytest.mark.parametrize(
    "query, data",
    [
        (None, {"results": [], "summary": {"exposure_level": "low"}}),
        ("Jane Doe", None),
        ("Jane Doe", {"results": []}),
        ("Jane Doe", {"summary": {"exposure_level": "low"}}),
        ("Jane Doe", {"results": [{"platform": "X"}], "summary": {"exposure_level": "low"}}),
        ("Jane Doe", {"results": [], "summary": {"exposure_level": "extreme"}}),
    ],
)
def test_malformed_input_is_rejected(renderer, query, data):
    with pytest.raises(ReportInputError) as exc_info:
        renderer.render(query, data, now=NOW)

    assert exc_info.value.message.startswith("Report generation failed")


def test_save_report_writes_file(tmp_path, make_search_data):
    report = render_report("Jane Doe", make_search_data(1), now=NOW)

    path = save_report(report, tmp_path / "reports")

    assert path.name == report.filename
    assert path.read_bytes() == report.content


def test_helpers():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    assert pdf_safe("“quoted” – dash") == '"quoted" - dash'


@pytest.mark.parametrize("score", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_confidence_is_rejected(renderer, make_search_data, score):
    data = make_search_data(1)
    data.results[0].confidence_score = score
    raw = make_search_data(1).model_dump()
    raw["results"][0]["confidence_score"] = score

    with pytest.raises(ReportInputError):
        renderer.render("Jane Doe", data, now=NOW)
    with pytest.raises(ReportInputError):
        renderer.render("Jane Doe", raw, now=NOW)

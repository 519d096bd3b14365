import pytest
from pydantic import ValidationError

from headhunter_trace.searches.schemas import ProfileResult, SearchSummary, confidence_percent


@pytest.mark.parametrize(
    "score, expected",
    [(0.0, 0), (0.874, 87), (0.875, 88), (1.0, 100), (1.7, 100), (-0.2, 0)],
)
def test_confidence_percent_is_rounded_and_clamped(score, expected):
    assert confidence_percent(score) == expected


def test_profile_result_requires_url():
    with pytest.raises(ValidationError):
        ProfileResult(result_type="mention", platform="News", profile_url="")


def test_profile_result_rejects_negative_counts():
    with pytest.raises(ValidationError):
        ProfileResult(result_type="mention", platform="News", profile_url="https://x.test", posts_count=-1)


def test_profile_result_rejects_unknown_type():
    with pytest.raises(ValidationError):
        ProfileResult(result_type="dossier", platform="News", profile_url="https://x.test")


def test_summary_rejects_unknown_exposure_level():
    with pytest.raises(ValidationError):
        SearchSummary(exposure_level="extreme")


@pytest.mark.parametrize("score", [float("nan"), float("inf"), float("-inf")])
def test_profile_result_rejects_non_finite_confidence(score):
    with pytest.raises(ValidationError):
        ProfileResult(
            result_type="mention",
            platform="News",
            profile_url="https://x.test",
            confidence_score=score,
        )

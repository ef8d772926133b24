"""
Unit tests for the Quality Analyzer.
"""

import pytest
from src.agents.extraction import AnswerExtractor
from src.agents.quality import QualityAnalyzer
from src.models.answer import AnswerCandidate, ParsedAnswers


def make_parsed(*answers):
    candidates = [
        AnswerCandidate(username=f"user{i}", answer=a, timestamp="2024-01-01")
        for i, a in enumerate(answers)
    ]
    return ParsedAnswers(story_id="test", answers=candidates, count=len(candidates))


@pytest.fixture
def analyzer():
    return QualityAnalyzer()


def test_high_quality_for_good_extraction(analyzer):
    report = analyzer.analyze_quality(make_parsed("answer1", "answer2", "answer3"), 0.9)

    assert report.quality == "high"
    assert report.confidence == pytest.approx(1.0)
    assert report.issues == []


def test_no_answers_is_low_quality(analyzer):
    """Zero answers pins the score to 0 and lists every triggered issue in order."""
    report = analyzer.analyze_quality(make_parsed(), 0.3)

    assert report.quality == "low"
    assert report.confidence == 0.0
    assert report.issues == ["Low OCR confidence", "No answers extracted"]


def test_no_answers_with_good_ocr(analyzer):
    report = analyzer.analyze_quality(make_parsed(), 0.99)

    assert report.quality == "low"
    assert report.confidence == 0.0
    assert report.issues == ["No answers extracted"]


def test_empty_ocr_text_is_low_quality(analyzer):
    parsed = AnswerExtractor().extract("", "empty-story")

    report = analyzer.analyze_quality(parsed, 0.9)

    assert parsed.count == 0
    assert report.quality == "low"
    assert report.confidence == 0.0
    assert "No answers extracted" in report.issues


def test_duplicate_answers_issue(analyzer):
    report = analyzer.analyze_quality(make_parsed(*["same answer"] * 4), 0.8)

    assert report.issues == ["Many duplicate answers"]
    assert report.confidence == pytest.approx(0.9)
    assert report.quality == "high"


def test_duplicates_detected_on_canonical_form(analyzer):
    """'Blue', 'blue!' and 'BLUE' are the same answer."""
    report = analyzer.analyze_quality(make_parsed("Blue", "blue!", "BLUE", "Blue."), 0.9)

    assert "Many duplicate answers" in report.issues


def test_few_answers_penalty(analyzer):
    report = analyzer.analyze_quality(make_parsed("yes", "no"), 0.9)

    assert report.issues == ["Very few answers extracted"]
    assert report.confidence == pytest.approx(0.8)
    assert report.quality == "high"


def test_penalties_compound(analyzer):
    report = analyzer.analyze_quality(make_parsed("yes", "no"), 0.5)

    assert report.issues == ["Low OCR confidence", "Very few answers extracted"]
    assert report.confidence == pytest.approx(0.56)
    assert report.quality == "medium"


def test_duplicate_penalty_on_top_of_low_confidence(analyzer):
    report = analyzer.analyze_quality(make_parsed("same", "same"), 0.2)

    # 0.7 * 0.8 = 0.56; unique 1 is not < 2 * 0.5, so no duplicate penalty
    assert report.confidence == pytest.approx(0.56)

    report = analyzer.analyze_quality(make_parsed(*["same"] * 5), 0.2)
    assert report.confidence == pytest.approx(0.7 * 0.9)
    assert report.quality == "medium"


def test_custom_thresholds():
    analyzer = QualityAnalyzer(low_confidence_threshold=0.95, high_score=0.95)

    report = analyzer.analyze_quality(make_parsed("a1", "a2", "a3"), 0.9)

    assert report.issues == ["Low OCR confidence"]
    assert report.quality == "medium"


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])

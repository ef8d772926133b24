"""
Unit tests for the Ingestion Agent.
"""

import json
import os
import tempfile

import pytest
from src.agents.ingestion import IngestionAgent


def write_ocr_result(directory, filename, data):
    with open(os.path.join(directory, filename), "w", encoding="utf-8") as f:
        if isinstance(data, str):
            f.write(data)
        else:
            json.dump(data, f)


def test_fetch_ocr_result():
    with tempfile.TemporaryDirectory() as tmpdir:
        write_ocr_result(tmpdir, "s1.json", {
            "story_id": "s1",
            "text": '@john replied "Blue"',
            "confidence": 0.92
        })
        agent = IngestionAgent(ocr_dir=tmpdir)

        raw = agent.fetch("s1")

        assert raw.story_id == "s1"
        assert raw.text == '@john replied "Blue"'
        assert raw.confidence == 0.92


def test_story_id_defaults_to_file_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        write_ocr_result(tmpdir, "s2.json", {"text": "hello", "confidence": 0.5})

        raw = IngestionAgent(ocr_dir=tmpdir).fetch("s2")

        assert raw.story_id == "s2"


def test_missing_and_malformed_results_are_skipped():
    with tempfile.TemporaryDirectory() as tmpdir:
        write_ocr_result(tmpdir, "bad_json.json", "{not json")
        write_ocr_result(tmpdir, "bad_confidence.json", {"text": "x", "confidence": 1.5})
        write_ocr_result(tmpdir, "good.json", {"text": "x", "confidence": 0.9})
        agent = IngestionAgent(ocr_dir=tmpdir)

        assert agent.fetch("missing") is None
        assert agent.fetch("bad_json") is None
        assert agent.fetch("bad_confidence") is None

        results = agent.fetch_all()
        assert [r.story_id for r in results] == ["good"]


def test_list_story_ids():
    with tempfile.TemporaryDirectory() as tmpdir:
        write_ocr_result(tmpdir, "b.json", {"text": "x", "confidence": 0.9})
        write_ocr_result(tmpdir, "a.json", {"text": "x", "confidence": 0.9})
        write_ocr_result(tmpdir, "notes.txt", "ignored")

        assert IngestionAgent(ocr_dir=tmpdir).list_story_ids() == ["a", "b"]

    assert IngestionAgent(ocr_dir="/nonexistent/dir").list_story_ids() == []


def test_mock_mode_generates_extractable_text():
    agent = IngestionAgent(use_mock_data=True)

    raw_texts = agent.fetch_all()

    assert len(raw_texts) == len(agent.list_story_ids()) > 0
    for raw in raw_texts:
        assert "replied" in raw.text
        assert 0.0 <= raw.confidence <= 1.0


def test_mock_mode_is_deterministic():
    agent = IngestionAgent(use_mock_data=True)

    assert agent.fetch("story_x") == agent.fetch("story_x")


def test_is_image_file():
    assert IngestionAgent.is_image_file("story_1/frame.JPG")
    assert IngestionAgent.is_image_file("story_1/frame.png")
    assert not IngestionAgent.is_image_file("story_1/story.json")


def test_extract_story_id():
    assert IngestionAgent.extract_story_id("story_1/frame.jpg") == "story_1"
    assert IngestionAgent.extract_story_id("frame.jpg") is None
    assert IngestionAgent.extract_story_id("/frame.jpg") is None


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])

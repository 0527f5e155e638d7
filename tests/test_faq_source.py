import json

import pytest

from faqlens.src.core.models import FaqEntry
from faqlens.src.database.faq_source import load_faqs


@pytest.mark.parametrize(
    "payload",
    [
        [{"question": "Q1?", "answer": "A1."}, {"question": "Q2?", "answer": "A2."}],
        {"faqs": {"list": [{"question": "Q1?", "answer": "A1."}, {"question": "Q2?", "answer": "A2."}]}},
    ],
)
def test_load_faqs_accepts_both_layouts(tmp_path, payload):
    path = tmp_path / "faqs.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    assert load_faqs(path) == [FaqEntry(question="Q1?", answer="A1."), FaqEntry(question="Q2?", answer="A2.")]


def test_missing_file_gives_empty_list(tmp_path):
    assert load_faqs(tmp_path / "nope.json") == []


@pytest.mark.parametrize("text", ["{not json", '{"faqs": []}', '[{"question": "no answer"}]', '"just a string"'])
def test_malformed_file_gives_empty_list(tmp_path, text):
    path = tmp_path / "faqs.json"
    path.write_text(text, encoding="utf-8")

    assert load_faqs(path) == []


def test_bundled_faq_file_loads():
    from faqlens.config.settings import settings

    faqs = load_faqs(settings.FAQ_FILE)

    assert faqs and faqs[0].question == "What is the capital of France?"

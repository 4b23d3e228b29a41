import asyncio

import httpx
import pytest

from config.settings import settings
from services import ai_service
from services.llm import llm_gemini
from services.llm.llm_gemini import GeminiConfigError, GeminiRequestError

GOOD = {"text": "Qui a construit l'arche ?", "options": ["Noé", "Moïse", "David", "Paul"], "correctIndex": 0}


def _mock_client(monkeypatch, handler):
    monkeypatch.setattr(
        llm_gemini, "_client", lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


def _candidate(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


# =========================
# quiz cleanup
# =========================
def test_clean_quiz_drops_malformed_items():
    raw = [
        GOOD,
        {**GOOD, "options": ["a", "b", "c"]},
        {**GOOD, "correctIndex": 4},
        {**GOOD, "correctIndex": True},
        {"options": GOOD["options"], "correctIndex": 1},
        "not a question",
    ]
    assert ai_service.clean_quiz(raw) == [GOOD]


def test_clean_quiz_non_array():
    assert ai_service.clean_quiz({"questions": [GOOD]}) == []
    assert ai_service.clean_quiz(None) == []


def test_generate_quiz_uses_schema(monkeypatch):
    seen = {}

    async def fake_generate_json(prompt, schema, **kwargs):
        seen["prompt"], seen["schema"] = prompt, schema
        return [GOOD] * 4

    monkeypatch.setattr(ai_service, "generate_json", fake_generate_json)
    quiz = asyncio.run(ai_service.generate_quiz("L'arche de Noé", "<p>Noé construit l'arche.</p>"))

    assert len(quiz) == 4
    assert seen["schema"] is ai_service.QUIZ_SCHEMA
    assert "L'arche de Noé" in seen["prompt"]


def test_generate_session_content_fallback(monkeypatch):
    async def empty(prompt, **kwargs):
        return "   "

    monkeypatch.setattr(ai_service, "generate_text", empty)
    html = asyncio.run(ai_service.generate_session_content("", "La prière", "Apprendre à prier"))
    assert html.startswith("Désolé")


# =========================
# REST client
# =========================
def test_generate_text_reads_candidate(monkeypatch):
    def handler(request: httpx.Request):
        assert request.url.params["key"] == "test-key"
        assert request.url.path.endswith(f"{settings.GEMINI_MODEL}:generateContent")
        return httpx.Response(200, json=_candidate("<h2>La prière</h2>"))

    _mock_client(monkeypatch, handler)
    assert asyncio.run(llm_gemini.generate_text("prompt")) == "<h2>La prière</h2>"


def test_generate_json_invalid_payload_returns_none(monkeypatch):
    _mock_client(monkeypatch, lambda request: httpx.Response(200, json=_candidate("pas du json")))
    assert asyncio.run(llm_gemini.generate_json("prompt", ai_service.QUIZ_SCHEMA)) is None


def test_missing_key(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
    with pytest.raises(GeminiConfigError):
        asyncio.run(llm_gemini.generate_text("prompt"))


def test_rejected_key(monkeypatch):
    body = {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key."}}
    _mock_client(monkeypatch, lambda request: httpx.Response(400, json=body))
    with pytest.raises(GeminiRequestError, match="rejetée"):
        asyncio.run(llm_gemini.generate_text("prompt"))


def test_unknown_model(monkeypatch):
    _mock_client(monkeypatch, lambda request: httpx.Response(404, json={"error": {"code": 404}}))
    with pytest.raises(GeminiRequestError, match="introuvable"):
        asyncio.run(llm_gemini.generate_text("prompt"))

import json
import logging
from typing import Any, Optional

import httpx

from config.settings import settings
from services.errors import ServiceError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiConfigError(ServiceError):
    status_code = 503


class GeminiRequestError(ServiceError):
    status_code = 502


def _client():
    return httpx.AsyncClient(timeout=httpx.Timeout(settings.LLM_TIMEOUT, connect=10.0))


def _url() -> str:
    return f"{GEMINI_BASE_URL}/{settings.GEMINI_MODEL}:generateContent"


# ==========================================================
# [common call with debug log]
# ==========================================================
async def _call_gemini(body: dict) -> dict:
    api_key = settings.GEMINI_API_KEY
    if not api_key:
        raise GeminiConfigError(
            "Erreur : La clé API Gemini n'est pas détectée. "
            "Vérifiez vos variables d'environnement (GEMINI_API_KEY ou API_KEY)."
        )

    async with _client() as client:
        try:
            r = await client.post(_url(), params={"key": api_key}, json=body)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = e.response.text
            logger.error(f"Gemini request failed ({e.response.status_code}): {detail[:500]}")
            if "API key not valid" in detail:
                raise GeminiRequestError(
                    "Erreur : La clé API fournie est rejetée par Google. "
                    "Vérifiez qu'elle est bien active dans Google AI Studio."
                ) from e
            if e.response.status_code == 404:
                raise GeminiRequestError(
                    "Le modèle spécifié est introuvable ou la clé ne permet pas d'y accéder."
                ) from e
            raise GeminiRequestError(f"Une erreur est survenue : {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            raise GeminiRequestError(f"Une erreur est survenue : {e}") from e

    data = r.json()
    logger.debug("===== GEMINI RAW RESPONSE =====")
    logger.debug(json.dumps(data, ensure_ascii=False, indent=2))
    return data


def extract_text(data: dict) -> str:
    """Concatenated text parts of the first candidate ("" when there is none)."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts)


# ==========================================================
# [TEXT mode]
# ==========================================================
async def generate_text(prompt: str, temperature: float | None = None, max_tokens: int | None = None) -> str:
    body = {
        "generationConfig": {
            "temperature": settings.LLM_TEMPERATURE if temperature is None else float(temperature),
            "maxOutputTokens": settings.LLM_MAX_TOKENS if max_tokens is None else int(max_tokens),
        },
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
    }
    data = await _call_gemini(body)
    return extract_text(data)


# ==========================================================
# [JSON mode, schema constrained]
# ==========================================================
async def generate_json(
    prompt: str,
    schema: dict,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> Optional[Any]:
    """Returns the parsed JSON, or None when the model answered something unparsable."""
    body = {
        "generationConfig": {
            "temperature": settings.LLM_TEMPERATURE if temperature is None else float(temperature),
            "maxOutputTokens": settings.LLM_MAX_TOKENS if max_tokens is None else int(max_tokens),
            "responseMimeType": "application/json",
            "responseSchema": schema,
        },
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
    }
    data = await _call_gemini(body)
    text = extract_text(data).strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.warning(f"Gemini returned invalid JSON: {text[:200]}")
        return None

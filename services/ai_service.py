import logging
from typing import List

from services.llm.llm_gemini import generate_json, generate_text

logger = logging.getLogger(__name__)

QUIZ_QUESTION_COUNT = 4
QUIZ_OPTION_COUNT = 4

QUIZ_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "text": {"type": "STRING", "description": "Le texte de la question."},
            "options": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "description": "Les 4 options de réponse possibles.",
            },
            "correctIndex": {"type": "INTEGER", "description": "L'index (0-3) de la réponse correcte."},
        },
        "required": ["text", "options", "correctIndex"],
    },
}


def content_prompt(title: str, subject_name: str, description: str) -> str:
    return (
        "Agis en tant qu'instructeur de club de jeunesse adventiste (MJA).\n"
        "Génère un cours structuré et passionnant pour des enfants (Aventuriers ou Explorateurs).\n"
        f"Titre : {title or subject_name}.\n"
        f"Thème : {subject_name}.\n"
        f"Objectif : {description}.\n"
        "Format : Retourne uniquement du HTML propre (utilisant h2, p, ul, li).\n"
        "N'inclus pas de balises <html> ou <body>, juste le contenu.\n"
        "Ton : Pédagogique, biblique, interactif et encourageant."
    )


def quiz_prompt(subject_name: str, content: str) -> str:
    return (
        f'Tu es un expert en pédagogie ludique. Basé sur le contenu suivant de la leçon "{subject_name}" :\n'
        "---\n"
        f"{content}\n"
        "---\n"
        f"Génère exactement {QUIZ_QUESTION_COUNT} questions de quiz à choix multiples (QCM).\n"
        "Chaque question doit être claire, adaptée à l'âge (4-15 ans) et avoir une seule bonne réponse "
        f"parmi {QUIZ_OPTION_COUNT} options."
    )


def clean_quiz(raw) -> List[dict]:
    """Keeps well-formed questions only: text, 4 string options, index within range."""
    if not isinstance(raw, list):
        return []
    questions = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        text = item.get("text")
        options = item.get("options")
        index = item.get("correctIndex")
        if not isinstance(text, str) or not text.strip():
            continue
        if not isinstance(options, list) or len(options) != QUIZ_OPTION_COUNT:
            continue
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < QUIZ_OPTION_COUNT:
            continue
        questions.append({"text": text.strip(), "options": [str(o) for o in options], "correctIndex": index})
    return questions[:QUIZ_QUESTION_COUNT]


async def generate_session_content(title: str, subject_name: str, description: str) -> str:
    html = await generate_text(content_prompt(title, subject_name, description))
    if not html.strip():
        return "Désolé, je n'ai pas pu générer le contenu du cours."
    return html


async def generate_quiz(subject_name: str, content: str) -> List[dict]:
    raw = await generate_json(quiz_prompt(subject_name, content), QUIZ_SCHEMA)
    quiz = clean_quiz(raw)
    if raw is not None and len(quiz) != QUIZ_QUESTION_COUNT:
        logger.warning(f"Quiz for {subject_name!r} kept {len(quiz)} of {len(raw) if isinstance(raw, list) else 0} questions")
    return quiz

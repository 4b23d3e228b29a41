from fastapi import APIRouter, Depends

from config.settings import settings
from dependencies.security import require_admin
from schemas.ai import ContentRequest, QuizRequest
from schemas.common import fail, ok
from services import ai_service

router = APIRouter(prefix="/ai", tags=["ai"], dependencies=[Depends(require_admin)])


# ✅ [CONTENT] HTML lesson from a title / theme / goal
@router.post("/content")
async def generate_content(req: ContentRequest):
    html = await ai_service.generate_session_content(req.title, req.subject_name, req.description)
    return ok({"content": html})


# ✅ [QUIZ] 4 questions from a lesson text
@router.post("/quiz")
async def generate_quiz(req: QuizRequest):
    if not req.subject_name or not req.content:
        return fail(400, "Veuillez d'abord écrire le contenu du cours pour générer un quiz.")
    return ok({"quiz": await ai_service.generate_quiz(req.subject_name, req.content)})


@router.get("/health")
async def ai_health_check():
    return ok({"model": settings.GEMINI_MODEL, "configured": bool(settings.GEMINI_API_KEY)})

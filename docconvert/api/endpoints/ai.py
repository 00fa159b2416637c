import asyncio

from fastapi import APIRouter

from docconvert.schemas.ai import AIProcessRequest, AIProcessResponse
from docconvert.services.ai_service import ai_service

router = APIRouter(tags=["AI"])

@router.post("/ai-process", response_model=AIProcessResponse)
async def process_ai(request: AIProcessRequest):
    text = await asyncio.to_thread(ai_service.generate, request.prompt, request.model)
    return AIProcessResponse(text=text)

from __future__ import annotations
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..chat import ChatHistory, ChatMessage, ChatThread, chat_history
from ..constants import ROLES
from ..flows import FlowError, FlowNotConfigured
from ..gemini_client import GeminiClient
from ..session import SessionUser
from .pages import LLM_UNAVAILABLE, feature_page, get_llm_client, require_role


class SendMessageRequest(BaseModel):
	text: str = Field(min_length=1)


def get_chat_history() -> ChatHistory:
	return chat_history


def _message(m: ChatMessage) -> Dict[str, Any]:
	return {"id": m.id, "sender": m.sender, "text": m.text, "timestamp": m.timestamp.isoformat()}


def _summary(t: ChatThread) -> Dict[str, Any]:
	return {"id": t.id, "title": t.title, "lastActivity": t.last_activity.isoformat()}


def _thread(t: ChatThread) -> Dict[str, Any]:
	return {**_summary(t), "messages": [_message(m) for m in t.messages]}


def build_chat_router(role: str) -> APIRouter:
	router = APIRouter(prefix=f"/{role}/ai-chat", tags=["chat"])
	guard = require_role(role)

	def _get(history: ChatHistory, user: SessionUser, thread_id: str) -> ChatThread:
		thread = history.get_thread(user.uid, thread_id)
		if thread is None:
			raise HTTPException(status_code=404, detail="chat not found")
		return thread

	@router.get("")
	async def chat_page(user: SessionUser = Depends(guard), history: ChatHistory = Depends(get_chat_history)):
		return feature_page(
			user,
			"AI Chat",
			"Ask questions and get help from your AI assistant.",
			threads=[_summary(t) for t in history.list_threads(user.uid)],
		)

	@router.post("/threads", status_code=201)
	async def create_thread(user: SessionUser = Depends(guard), history: ChatHistory = Depends(get_chat_history)):
		return _thread(history.create_thread(user.uid))

	@router.get("/threads/{thread_id}")
	async def read_thread(thread_id: str, user: SessionUser = Depends(guard), history: ChatHistory = Depends(get_chat_history)):
		return _thread(_get(history, user, thread_id))

	@router.delete("/threads/{thread_id}", status_code=204)
	async def delete_thread(thread_id: str, user: SessionUser = Depends(guard), history: ChatHistory = Depends(get_chat_history)):
		if not history.delete_thread(user.uid, thread_id):
			raise HTTPException(status_code=404, detail="chat not found")

	@router.post("/threads/{thread_id}/messages")
	async def send_message(
		thread_id: str,
		req: SendMessageRequest,
		user: SessionUser = Depends(guard),
		history: ChatHistory = Depends(get_chat_history),
		client: Optional[GeminiClient] = Depends(get_llm_client),
	):
		_get(history, user, thread_id)
		try:
			turn = await history.send_message(user.uid, thread_id, req.text, client=client)
		except FlowNotConfigured:
			raise HTTPException(status_code=503, detail=LLM_UNAVAILABLE)
		except FlowError as exc:
			raise HTTPException(status_code=502, detail=exc.message)
		body = {
			"thread": _summary(turn.thread),
			"userMessage": _message(turn.user_message),
			"reply": _message(turn.reply),
		}
		if turn.title_error:
			body["title_error"] = turn.title_error
		return body

	return router


routers = [build_chat_router(role) for role in ROLES]

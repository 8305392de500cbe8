"""In-memory chat threads, kept per user for the life of the process."""
from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .flows import FlowError, generate_response, summarize_chat_title
from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

NEW_CHAT_TITLE = "New Chat"


def _now() -> datetime:
	return datetime.now(timezone.utc)


@dataclass
class ChatMessage:
	sender: str  # "user" or "ai"
	text: str
	id: str = field(default_factory=lambda: uuid.uuid4().hex)
	timestamp: datetime = field(default_factory=_now)


@dataclass
class ChatThread:
	id: str = field(default_factory=lambda: uuid.uuid4().hex)
	title: str = NEW_CHAT_TITLE
	last_activity: datetime = field(default_factory=_now)
	messages: List[ChatMessage] = field(default_factory=list)

	def append(self, sender: str, text: str) -> ChatMessage:
		message = ChatMessage(sender=sender, text=text)
		self.messages.append(message)
		self.last_activity = message.timestamp
		return message


@dataclass
class ChatTurn:
	thread: ChatThread
	user_message: ChatMessage
	reply: ChatMessage
	title_error: Optional[str] = None


class ChatHistory:
	def __init__(self) -> None:
		self._threads: Dict[str, Dict[str, ChatThread]] = {}

	def _owned(self, uid: str) -> Dict[str, ChatThread]:
		return self._threads.setdefault(uid, {})

	def list_threads(self, uid: str) -> List[ChatThread]:
		return sorted(self._owned(uid).values(), key=lambda t: t.last_activity, reverse=True)

	def create_thread(self, uid: str) -> ChatThread:
		thread = ChatThread()
		self._owned(uid)[thread.id] = thread
		return thread

	def get_thread(self, uid: str, thread_id: str) -> Optional[ChatThread]:
		return self._owned(uid).get(thread_id)

	def delete_thread(self, uid: str, thread_id: str) -> bool:
		return self._owned(uid).pop(thread_id, None) is not None

	def clear(self, uid: Optional[str] = None) -> None:
		if uid is None:
			self._threads.clear()
		else:
			self._threads.pop(uid, None)

	async def send_message(
		self,
		uid: str,
		thread_id: str,
		text: str,
		*,
		client: Optional[GeminiClient] = None,
	) -> ChatTurn:
		"""Append ``text``, ask for a reply, and title the thread after its first exchange.

		Raises ``KeyError`` for an unknown thread and ``FlowError`` when no reply
		could be produced; the user message stays in the thread either way.
		"""
		thread = self.get_thread(uid, thread_id)
		if thread is None:
			raise KeyError(thread_id)
		user_message = thread.append("user", text)
		result = await generate_response({"prompt": text}, client=client)
		reply = thread.append("ai", result.response)
		turn = ChatTurn(thread=thread, user_message=user_message, reply=reply)
		if thread.title == NEW_CHAT_TITLE:
			snippet = f"User: {text}\nAI: {result.response}"
			try:
				summary = await summarize_chat_title({"conversationSnippet": snippet}, client=client)
				thread.title = summary.title
			except FlowError as exc:
				logger.info("Keeping default title for thread %s", thread.id)
				turn.title_error = exc.message
		return turn


chat_history = ChatHistory()

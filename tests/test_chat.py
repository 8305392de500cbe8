import asyncio

import pytest

from tutortrack.chat import NEW_CHAT_TITLE, ChatHistory
from tutortrack.flows import FlowError
from tutortrack.gemini_client import GeminiError

from conftest import FakeGeminiClient


def test_first_exchange_names_the_thread():
	history = ChatHistory()
	thread = history.create_thread("u1")
	llm = FakeGeminiClient({"response": "Plants turn light into sugar."}, {"title": "Photosynthesis Basics"})

	turn = asyncio.run(history.send_message("u1", thread.id, "What is photosynthesis?", client=llm))

	assert turn.reply.text == "Plants turn light into sugar."
	assert turn.title_error is None
	assert thread.title == "Photosynthesis Basics"
	assert [m.sender for m in thread.messages] == ["user", "ai"]
	assert llm.calls[1]["prompt"].count("User: What is photosynthesis?\nAI: Plants turn light into sugar.") == 1


def test_later_messages_keep_the_title():
	history = ChatHistory()
	thread = history.create_thread("u1")
	llm = FakeGeminiClient({"response": "Hi!"}, {"title": "Greetings"}, {"response": "Sure."})
	asyncio.run(history.send_message("u1", thread.id, "Hello", client=llm))
	asyncio.run(history.send_message("u1", thread.id, "Can you help?", client=llm))
	assert thread.title == "Greetings"
	assert len(llm.calls) == 3


def test_title_failure_keeps_default():
	history = ChatHistory()
	thread = history.create_thread("u1")
	llm = FakeGeminiClient({"response": "Hi!"}, GeminiError("down"))
	turn = asyncio.run(history.send_message("u1", thread.id, "Hello", client=llm))
	assert thread.title == NEW_CHAT_TITLE
	assert turn.title_error


def test_reply_failure_keeps_user_message():
	history = ChatHistory()
	thread = history.create_thread("u1")
	llm = FakeGeminiClient(GeminiError("down"))
	with pytest.raises(FlowError):
		asyncio.run(history.send_message("u1", thread.id, "Hello", client=llm))
	assert [m.text for m in thread.messages] == ["Hello"]


def test_threads_are_per_user():
	history = ChatHistory()
	thread = history.create_thread("u1")
	assert history.get_thread("u2", thread.id) is None
	assert history.list_threads("u2") == []
	assert history.delete_thread("u1", thread.id)
	assert history.list_threads("u1") == []


def test_chat_over_http(client, student, llm):
	created = client.post("/student/ai-chat/threads")
	assert created.status_code == 201
	thread_id = created.json()["id"]
	assert created.json()["title"] == "New Chat"

	llm.queue({"response": "A fraction is part of a whole."}, {"title": "Understanding Fractions"})
	r = client.post(f"/student/ai-chat/threads/{thread_id}/messages", json={"text": "What is a fraction?"})
	assert r.status_code == 200
	body = r.json()
	assert body["reply"]["sender"] == "ai"
	assert body["thread"]["title"] == "Understanding Fractions"
	assert "title_error" not in body

	page = client.get("/student/ai-chat").json()
	assert [t["title"] for t in page["threads"]] == ["Understanding Fractions"]
	messages = client.get(f"/student/ai-chat/threads/{thread_id}").json()["messages"]
	assert [m["sender"] for m in messages] == ["user", "ai"]


def test_chat_title_error_over_http(client, teacher, llm):
	thread_id = client.post("/teacher/ai-chat/threads").json()["id"]
	llm.queue({"response": "Hello there."}, GeminiError("down"))
	body = client.post(f"/teacher/ai-chat/threads/{thread_id}/messages", json={"text": "Hi"}).json()
	assert body["thread"]["title"] == "New Chat"
	assert body["title_error"] == "Could not automatically generate a title for this chat."


def test_chat_reply_failure_over_http(client, student, llm):
	thread_id = client.post("/student/ai-chat/threads").json()["id"]
	llm.queue(GeminiError("down"))
	r = client.post(f"/student/ai-chat/threads/{thread_id}/messages", json={"text": "Hi"})
	assert r.status_code == 502
	messages = client.get(f"/student/ai-chat/threads/{thread_id}").json()["messages"]
	assert [m["text"] for m in messages] == ["Hi"]


def test_unknown_thread_is_404(client, student):
	assert client.get("/student/ai-chat/threads/missing").status_code == 404
	assert client.delete("/student/ai-chat/threads/missing").status_code == 404

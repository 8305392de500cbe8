import os
import tempfile

# The engine is created at import time, so point it at a scratch database first
_db_dir = tempfile.mkdtemp(prefix="tutortrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["IDENTITY_BACKEND"] = "local"
os.environ["DOCUMENT_BACKEND"] = "sql"
os.environ["GEMINI_API_KEY"] = ""
os.environ["FIREBASE_API_KEY"] = ""
os.environ["GUEST_RETENTION_DAYS"] = "7"

import pytest
from fastapi.testclient import TestClient

from tutortrack import models  # noqa: F401
from tutortrack.chat import chat_history
from tutortrack.db import Base, SessionLocal, engine
from tutortrack.gemini_client import GeminiError
from tutortrack.main import app
from tutortrack.routers.pages import get_llm_client


class FakeGeminiClient:
	"""Stands in for GeminiClient; replies are queued per test."""

	def __init__(self, *responses):
		self.responses = list(responses)
		self.calls = []
		self.closed = False

	def queue(self, *responses):
		self.responses.extend(responses)

	async def generate_structured(self, prompt, schema):
		self.calls.append({"prompt": prompt, "schema": schema})
		if not self.responses:
			raise GeminiError("no response queued")
		item = self.responses.pop(0)
		if isinstance(item, Exception):
			raise item
		return item

	async def aclose(self):
		self.closed = True


@pytest.fixture(autouse=True)
def fresh_state():
	Base.metadata.drop_all(bind=engine)
	Base.metadata.create_all(bind=engine)
	chat_history.clear()
	yield
	app.dependency_overrides.clear()


@pytest.fixture
def db():
	session = SessionLocal()
	try:
		yield session
	finally:
		session.close()


@pytest.fixture
def llm():
	return FakeGeminiClient()


@pytest.fixture
def client(llm):
	app.dependency_overrides[get_llm_client] = lambda: llm
	return TestClient(app)


def start_guest(client, role):
	r = client.post("/auth/guest", json={"role": role})
	assert r.status_code == 200, r.text
	return r.json()


@pytest.fixture
def student(client):
	return start_guest(client, "student")


@pytest.fixture
def teacher(client):
	return start_guest(client, "teacher")

from tutortrack.chat import chat_history
from tutortrack.flows.quiz import QUIZ_FAILURE
from tutortrack.gemini_client import GeminiError
from tutortrack.main import app
from tutortrack.routers.pages import get_llm_client
from tutortrack.session import decode_access_token

from conftest import start_guest

QUIZ = {
	"quiz": [
		{"question": "What is 1/2 + 1/4?", "options": ["3/4", "2/6", "1/8"], "answer": "3/4"},
	]
}

CURRICULUM = {
	"title": "Intro to  Astronomy",
	"description": "A first look at the night sky.",
	"learning_objectives": ["Identify constellations"],
	"modules": [
		{"moduleNumber": 1, "moduleTitle": "The Sky Above", "topics": ["Star maps"], "activities": ["Observation log"]},
	],
}


def test_landing_lists_roles(client):
	body = client.get("/").json()
	assert body["roles"] == ["student", "teacher"]
	assert body["redirect"] is None


def test_landing_points_signed_in_user_to_dashboard(client, teacher):
	assert client.get("/").json()["redirect"] == "/teacher/dashboard"


def test_pages_redirect_without_session(client):
	r = client.get("/student/dashboard", follow_redirects=False)
	assert r.status_code == 303
	assert r.headers["location"] == "/"
	r = client.get("/navigation", follow_redirects=False)
	assert r.status_code == 303


def test_wrong_role_goes_to_own_dashboard(client, student):
	r = client.get("/teacher/quiz-maker", follow_redirects=False)
	assert r.status_code == 303
	assert r.headers["location"] == "/student/dashboard"


def test_student_dashboard(client, student):
	body = client.get("/student/dashboard").json()
	assert body["title"] == "Student Dashboard"
	assert body["description"].startswith("Welcome back, Student!")
	assert [m["title"] for m in body["metrics"]] == ["Active Courses", "Overall Progress", "Assignments Due"]
	assert len(body["studyActivity"]) == 6


def test_teacher_navigation(client, teacher):
	body = client.get("/navigation").json()
	assert body["role"] == "teacher"
	assert [item["href"] for item in body["items"]] == [
		"/teacher/dashboard",
		"/teacher/paper-checker",
		"/teacher/quiz-maker",
		"/teacher/curriculum-creator",
		"/teacher/ai-chat",
	]


def test_logout_clears_session(client):
	token = start_guest(client, "student")["access_token"]
	client.cookies.clear()
	headers = {"Authorization": f"Bearer {token}"}
	assert client.get("/student/projects", headers=headers).status_code == 200

	assert client.post("/auth/logout", headers=headers).json() == {"redirect": "/"}
	r = client.get("/student/projects", headers=headers, follow_redirects=False)
	assert r.status_code == 303
	assert r.headers["location"] == "/"
	assert client.get("/auth/me", headers=headers).status_code == 401


def test_signup_and_password_login(client):
	r = client.post("/auth/signup", json={"email": "ada@example.com", "password": "secret1", "role": "teacher"})
	assert r.status_code == 201
	assert r.json()["redirect"] == "/teacher/dashboard"
	client.cookies.clear()

	r = client.post("/auth/token", data={"username": "ada@example.com", "password": "secret1"})
	assert r.status_code == 200
	body = r.json()
	assert body["token_type"] == "bearer"
	assert body["role"] == "teacher"
	me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}).json()
	assert me["email"] == "ada@example.com"


def test_signup_without_role_is_refused(client):
	r = client.post("/auth/signup", json={"email": "ada@example.com", "password": "secret1"})
	assert r.status_code == 400
	assert r.json()["detail"]["message"] == "Please select a role before signing up."


def test_bad_password_reads_generic_message(client):
	client.post("/auth/signup", json={"email": "ada@example.com", "password": "secret1", "role": "student"})
	client.cookies.clear()
	r = client.post("/auth/token", data={"username": "ada@example.com", "password": "nope-nope"})
	assert r.status_code == 401
	assert r.json()["detail"] == "Invalid email or password."


def test_guest_upgrade_over_http(client):
	guest = start_guest(client, "student")
	r = client.post("/auth/signup", json={"email": "guest@example.com", "password": "secret1"})
	assert r.status_code == 201
	assert r.json()["title"] == "Account Upgraded!"
	assert r.json()["role"] == "student"
	me = client.get("/auth/me").json()
	assert me["is_anonymous"] is False
	assert client.get("/auth/me", headers={"Authorization": f"Bearer {guest['access_token']}"}).status_code == 401


def test_password_reset_unknown_email(client):
	r = client.post("/auth/password-reset", json={"email": "nobody@example.com"})
	assert r.status_code == 401


def test_quiz_maker_rejects_invalid_body_before_model_call(client, teacher, llm):
	r = client.post("/teacher/quiz-maker", json={"topic": "Fractions", "numQuestions": 21, "difficulty": "easy"})
	assert r.status_code == 422
	assert llm.calls == []


def test_quiz_maker_passes_output_through(client, teacher, llm):
	llm.queue(QUIZ)
	r = client.post("/teacher/quiz-maker", json={"topic": "Fractions", "numQuestions": 1, "difficulty": "easy"})
	assert r.status_code == 200
	assert r.json() == QUIZ


def test_flow_failure_is_bad_gateway(client, teacher, llm):
	llm.queue(GeminiError("timeout"))
	r = client.post("/teacher/quiz-maker", json={"topic": "Fractions", "numQuestions": 3, "difficulty": "hard"})
	assert r.status_code == 502
	assert r.json()["detail"] == QUIZ_FAILURE


def test_paper_checker_omits_missing_optionals(client, teacher, llm):
	llm.queue({"grade": "A-", "feedback": "Clear argument."})
	r = client.post("/teacher/paper-checker", json={
		"paperText": "Photosynthesis converts light into chemical energy. " * 3,
		"assignmentInstructions": "Explain photosynthesis in detail.",
		"gradingRubric": "Accuracy, clarity and use of examples.",
	})
	assert r.status_code == 200
	assert r.json() == {"grade": "A-", "feedback": "Clear argument."}


def test_student_career_coach(client, student, llm):
	advice = {
		"suggestedCareerPaths": "Data analyst",
		"skillsToDevelop": "SQL",
		"actionableSteps": "Take a course",
	}
	llm.queue(advice)
	r = client.post("/student/career-coach", json={
		"currentSkills": "Python, spreadsheets, statistics",
		"interests": "Data and sports",
		"careerAspirations": "Work in analytics",
	})
	assert r.status_code == 200
	assert r.json() == advice


def test_practice_quiz_score(client, student):
	r = client.post("/student/practice-quiz/score", json={"quiz": QUIZ, "answers": {"0": "3/4"}})
	assert r.json() == {"score": 1, "total": 1, "correct": [True]}


def test_curriculum_export_pdf(client, teacher):
	r = client.post("/teacher/curriculum-creator/export?format=pdf", json=CURRICULUM)
	assert r.status_code == 200
	assert r.headers["content-type"] == "application/pdf"
	assert r.content.startswith(b"%PDF")
	assert 'filename="Intro_to__Astronomy.pdf"' in r.headers["content-disposition"]


def test_curriculum_export_docx(client, teacher):
	r = client.post("/teacher/curriculum-creator/export?format=docx", json=CURRICULUM)
	assert r.status_code == 200
	assert r.content[:2] == b"PK"
	assert 'filename="Intro_to__Astronomy.docx"' in r.headers["content-disposition"]


def test_curriculum_export_non_latin_title(client, teacher):
	r = client.post("/teacher/curriculum-creator/export?format=docx", json={**CURRICULUM, "title": 'Matemáticas 数学 "Intro"'})
	assert r.status_code == 200
	disposition = r.headers["content-disposition"]
	assert 'filename="Matematicas__Intro.docx"' in disposition
	assert "filename*=UTF-8''Matem%C3%A1ticas_%E6%95%B0%E5%AD%A6_%22Intro%22.docx" in disposition


def test_invalid_body_without_api_key_is_422(client, teacher):
	# Use the real client dependency; GEMINI_API_KEY is blank in tests
	app.dependency_overrides.pop(get_llm_client)
	r = client.post("/teacher/quiz-maker", json={"topic": "Fractions", "numQuestions": 21, "difficulty": "easy"})
	assert r.status_code == 422


def test_valid_body_without_api_key_is_503(client, teacher):
	app.dependency_overrides.pop(get_llm_client)
	r = client.post("/teacher/quiz-maker", json={"topic": "Fractions", "numQuestions": 3, "difficulty": "easy"})
	assert r.status_code == 503
	assert r.json()["detail"] == "The AI service is not configured."


def test_logout_drops_chat_threads(client):
	token = start_guest(client, "student")["access_token"]
	client.post("/student/ai-chat/threads")
	assert client.get("/student/ai-chat").json()["threads"]
	client.post("/auth/logout")
	uid = decode_access_token(token)["sub"]
	assert chat_history.list_threads(uid) == []

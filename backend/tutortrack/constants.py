from typing import Any, Dict, List

from .settings import settings

APP_NAME = settings.app_name

STUDENT = "student"
TEACHER = "teacher"
ROLES = (STUDENT, TEACHER)


def _nav(role: str, slug: str, label: str) -> Dict[str, str]:
	return {"href": f"/{role}/{slug}", "label": label}


STUDENT_NAV_ITEMS: List[Dict[str, str]] = [
	_nav(STUDENT, "dashboard", "Dashboard"),
	_nav(STUDENT, "career-coach", "Career Coach"),
	_nav(STUDENT, "skills-guide", "Skills Guide"),
	_nav(STUDENT, "assignment-help", "Assignment Help"),
	_nav(STUDENT, "ai-chat", "AI Chat"),
	_nav(STUDENT, "recommendations", "Recommendations"),
	_nav(STUDENT, "practice-quiz", "Practice Quiz"),
	_nav(STUDENT, "resume-builder", "Resume Builder"),
	_nav(STUDENT, "scholarship-finder", "Scholarship Finder"),
	_nav(STUDENT, "projects", "Projects"),
	_nav(STUDENT, "skills-development", "Skills Development"),
]

TEACHER_NAV_ITEMS: List[Dict[str, str]] = [
	_nav(TEACHER, "dashboard", "Dashboard"),
	_nav(TEACHER, "paper-checker", "Paper Checker"),
	_nav(TEACHER, "quiz-maker", "Quiz Maker"),
	_nav(TEACHER, "curriculum-creator", "Curriculum Creator"),
	_nav(TEACHER, "ai-chat", "AI Chat"),
]

NAV_ITEMS_BY_ROLE: Dict[str, List[Dict[str, str]]] = {
	STUDENT: STUDENT_NAV_ITEMS,
	TEACHER: TEACHER_NAV_ITEMS,
}


def dashboard_path(role: str) -> str:
	return f"/{role}/dashboard"


# Placeholder dashboard content until course tracking exists

STUDENT_METRICS: List[Dict[str, str]] = [
	{"title": "Active Courses", "value": "5", "description": "+2 from last month"},
	{"title": "Overall Progress", "value": "75%", "description": "Keep up the great work!"},
	{"title": "Assignments Due", "value": "3", "description": "Upcoming this week"},
]

STUDY_ACTIVITY: List[Dict[str, Any]] = [
	{"month": "January", "studyHours": 186, "assignments": 80},
	{"month": "February", "studyHours": 305, "assignments": 200},
	{"month": "March", "studyHours": 237, "assignments": 120},
	{"month": "April", "studyHours": 73, "assignments": 190},
	{"month": "May", "studyHours": 209, "assignments": 130},
	{"month": "June", "studyHours": 214, "assignments": 140},
]

COURSE_PROGRESS: List[Dict[str, Any]] = [
	{"name": "Completed", "value": 70},
	{"name": "In Progress", "value": 20},
	{"name": "Pending", "value": 10},
]

ACHIEVEMENTS: List[str] = ["Quick Learner", "Topic Master: Algebra", "Perfect Score", "Collaborator King"]

WELCOME_MESSAGES: List[str] = [
	"Let's make today a productive learning day.",
	"Ready to tackle your goals?",
	"Your learning journey continues. What's next?",
	"Seize the day and unlock your potential.",
	"Every session is a step towards success. Let's get started!",
]

TEACHER_METRICS: List[Dict[str, str]] = [
	{"title": "Active Classes", "value": "4", "description": "Total of 120 students"},
	{"title": "Papers to Grade", "value": "12", "description": "3 overdue"},
	{"title": "Student Engagement", "value": "85%", "description": "Average across all classes"},
]

CLASS_PERFORMANCE: List[Dict[str, Any]] = [
	{"subject": "Math", "avgScore": 85, "participation": 90},
	{"subject": "Science", "avgScore": 78, "participation": 82},
	{"subject": "History", "avgScore": 92, "participation": 95},
	{"subject": "English", "avgScore": 88, "participation": 80},
	{"subject": "Art", "avgScore": 95, "participation": 98},
]

GRADING_STATUS: List[Dict[str, Any]] = [
	{"name": "Graded", "value": 120},
	{"name": "Pending", "value": 35},
	{"name": "Overdue", "value": 5},
]

RECENT_ACTIVITY: List[Dict[str, str]] = [
	{"name": "Alice Smith", "activity": "Submitted 'History Essay'", "time": "2h ago"},
	{"name": "Bob Johnson", "activity": "Asked a question in 'Calculus Q&A'", "time": "5h ago"},
	{"name": "Charlie Brown", "activity": "Completed 'Science Quiz 3'", "time": "1d ago"},
]

PROJECTS: List[Dict[str, Any]] = [
	{
		"id": "1",
		"title": "AI Study Buddy App",
		"description": "Develop an AI-powered application to help students organize their study schedules and resources.",
		"members": ["Alice", "Bob", "Charlie"],
		"status": "Active",
		"lastUpdated": "2 days ago",
	},
	{
		"id": "2",
		"title": "History of Ancient Rome Interactive Timeline",
		"description": "Create an interactive web-based timeline showcasing key events in Ancient Roman history.",
		"members": ["Diana", "Eve"],
		"status": "Planning",
		"lastUpdated": "5 days ago",
	},
	{
		"id": "3",
		"title": "Sustainable Energy Solutions Research",
		"description": "Collaborative research paper on innovative sustainable energy solutions for urban environments.",
		"members": ["Frank", "Grace", "Henry"],
		"status": "Completed",
		"lastUpdated": "1 month ago",
	},
	{
		"id": "4",
		"title": "Community Coding Workshop",
		"description": "Organize and run a coding workshop for local high school students.",
		"members": ["Ivy", "Jack", "Alice"],
		"status": "Active",
		"lastUpdated": "1 week ago",
	},
]

SKILLS_DATA: List[Dict[str, Any]] = [
	{
		"name": "Python Programming",
		"description": "Develop versatile applications, from web development to data science.",
		"resources": [
			{"name": "Official Python Tutorial", "url": "#", "type": "Documentation"},
			{"name": "Coursera: Python for Everybody", "url": "#", "type": "Course"},
		],
	},
	{
		"name": "Data Analysis with Pandas",
		"description": "Learn to manipulate and analyze data effectively using Python's Pandas library.",
		"resources": [
			{"name": "Pandas Documentation", "url": "#", "type": "Documentation"},
			{"name": "Kaggle Learn: Pandas", "url": "#", "type": "Interactive Course"},
		],
	},
	{
		"name": "Effective Communication",
		"description": "Enhance your ability to convey ideas clearly and persuasively.",
		"resources": [
			{"name": "Toastmasters International", "url": "#", "type": "Organization"},
			{"name": "Book: Crucial Conversations", "url": "#", "type": "Book"},
		],
	},
]

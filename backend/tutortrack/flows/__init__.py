from .base import FlowError, FlowNotConfigured
from .conversation import generate_response, summarize_chat_title
from .curriculum import create_curriculum
from .grading import analyze_and_grade_paper
from .guidance import assignment_help, career_coach, generate_skills_guide
from .opportunities import find_opportunities, generate_recommendations
from .quiz import generate_practice_quiz, generate_quiz
from .resume import build_resume_and_cover_letter

__all__ = [
	"FlowError",
	"FlowNotConfigured",
	"analyze_and_grade_paper",
	"assignment_help",
	"build_resume_and_cover_letter",
	"career_coach",
	"create_curriculum",
	"find_opportunities",
	"generate_practice_quiz",
	"generate_quiz",
	"generate_recommendations",
	"generate_response",
	"generate_skills_guide",
	"summarize_chat_title",
]

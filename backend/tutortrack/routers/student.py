import random
from typing import Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..constants import (
	ACHIEVEMENTS,
	COURSE_PROGRESS,
	PROJECTS,
	SKILLS_DATA,
	STUDENT,
	STUDENT_METRICS,
	STUDY_ACTIVITY,
	WELCOME_MESSAGES,
)
from ..flows import (
	assignment_help,
	build_resume_and_cover_letter,
	career_coach,
	find_opportunities,
	generate_practice_quiz,
	generate_recommendations,
	generate_skills_guide,
)
from ..flows.guidance import (
	AssignmentHelpInput,
	AssignmentHelpOutput,
	CareerCoachInput,
	CareerCoachOutput,
	SkillsGuideInput,
	SkillsGuideOutput,
)
from ..flows.opportunities import (
	GenerateRecommendationsInput,
	GenerateRecommendationsOutput,
	ScholarshipFinderInput,
	ScholarshipFinderOutput,
)
from ..flows.quiz import GenerateQuizOutput, PracticeQuizInput, QuizScore, score_quiz
from ..flows.resume import ResumeBuilderInput, ResumeBuilderOutput
from ..gemini_client import GeminiClient
from ..session import SessionUser
from .pages import feature_page, get_llm_client, require_role, run_form

router = APIRouter(prefix="/student", tags=["student"])

require_student = require_role(STUDENT)


def first_name(user: SessionUser, fallback: str) -> str:
	if user.display_name:
		return user.display_name.split(" ")[0]
	if user.email:
		return user.email.split("@")[0]
	return fallback


class QuizSubmission(BaseModel):
	quiz: GenerateQuizOutput
	# question index -> chosen option
	answers: Dict[int, str] = {}


@router.get("/dashboard")
async def dashboard(user: SessionUser = Depends(require_student)):
	name = first_name(user, "Student")
	return feature_page(
		user,
		"Student Dashboard",
		f"Welcome back, {name}! {random.choice(WELCOME_MESSAGES)}",
		metrics=STUDENT_METRICS,
		studyActivity=STUDY_ACTIVITY,
		courseProgress=COURSE_PROGRESS,
		achievements=ACHIEVEMENTS,
	)


@router.get("/projects")
async def projects(user: SessionUser = Depends(require_student)):
	return feature_page(
		user,
		"Collaborative Projects",
		"Work together with your peers on exciting projects.",
		projects=PROJECTS,
	)


@router.get("/skills-development")
async def skills_development(user: SessionUser = Depends(require_student)):
	return feature_page(
		user,
		"Skills Development",
		"Explore skills and curated resources to grow your abilities.",
		skills=SKILLS_DATA,
	)


@router.get("/career-coach")
async def career_coach_page(user: SessionUser = Depends(require_student)):
	return feature_page(
		user,
		"AI Career Coach",
		"Discover career paths and skills tailored to your interests and aspirations. Let our AI guide you with actionable steps!",
	)


@router.post("/career-coach", response_model=CareerCoachOutput, response_model_exclude_none=True)
async def career_coach_submit(req: CareerCoachInput, user: SessionUser = Depends(require_student), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(career_coach(req, client=client))


@router.get("/skills-guide")
async def skills_guide_page(user: SessionUser = Depends(require_student)):
	return feature_page(
		user,
		"AI Skills Guide",
		"Get a personalized plan to develop new skills and achieve your career goals.",
	)


@router.post("/skills-guide", response_model=SkillsGuideOutput, response_model_exclude_none=True)
async def skills_guide_submit(req: SkillsGuideInput, user: SessionUser = Depends(require_student), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(generate_skills_guide(req, client=client))


@router.get("/assignment-help")
async def assignment_help_page(user: SessionUser = Depends(require_student)):
	return feature_page(
		user,
		"AI Assignment Helper",
		"Get explanations, suggestions, and guidance for your assignments. Now with subject-specific help!",
	)


@router.post("/assignment-help", response_model=AssignmentHelpOutput, response_model_exclude_none=True)
async def assignment_help_submit(req: AssignmentHelpInput, user: SessionUser = Depends(require_student), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(assignment_help(req, client=client))


@router.get("/practice-quiz")
async def practice_quiz_page(user: SessionUser = Depends(require_student)):
	return feature_page(
		user,
		"Practice Quiz Generator",
		"Test your knowledge on any topic by generating custom quizzes.",
		defaults={"topic": "", "numQuestions": 5, "difficulty": "medium"},
	)


@router.post("/practice-quiz", response_model=GenerateQuizOutput)
async def practice_quiz_submit(req: PracticeQuizInput, user: SessionUser = Depends(require_student), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(generate_practice_quiz(req, client=client))


@router.post("/practice-quiz/score", response_model=QuizScore)
async def practice_quiz_score(req: QuizSubmission, user: SessionUser = Depends(require_student)):
	return score_quiz(req.quiz, req.answers)


@router.get("/recommendations")
async def recommendations_page(user: SessionUser = Depends(require_student)):
	return feature_page(
		user,
		"Personalized Recommendations",
		"Discover learning resources and educational programs from across the internet, tailored to your goals.",
	)


@router.post("/recommendations", response_model=GenerateRecommendationsOutput, response_model_exclude_none=True)
async def recommendations_submit(req: GenerateRecommendationsInput, user: SessionUser = Depends(require_student), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(generate_recommendations(req, client=client))


@router.get("/resume-builder")
async def resume_builder_page(user: SessionUser = Depends(require_student)):
	return feature_page(
		user,
		"AI Resume Builder",
		"Create a professional resume and tailored cover letter in minutes.",
	)


@router.post("/resume-builder", response_model=ResumeBuilderOutput)
async def resume_builder_submit(req: ResumeBuilderInput, user: SessionUser = Depends(require_student), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(build_resume_and_cover_letter(req, client=client))


@router.get("/scholarship-finder")
async def scholarship_finder_page(user: SessionUser = Depends(require_student)):
	return feature_page(
		user,
		"Scholarship & Internship Finder",
		"Discover scholarships and internships from across the internet, tailored to your profile.",
	)


@router.post("/scholarship-finder", response_model=ScholarshipFinderOutput, response_model_exclude_none=True)
async def scholarship_finder_submit(req: ScholarshipFinderInput, user: SessionUser = Depends(require_student), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(find_opportunities(req, client=client))

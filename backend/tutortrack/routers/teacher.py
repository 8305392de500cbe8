from typing import Literal, Optional

from fastapi import APIRouter, Depends, Response

from ..constants import CLASS_PERFORMANCE, GRADING_STATUS, RECENT_ACTIVITY, TEACHER, TEACHER_METRICS
from ..export import DOCX_MEDIA_TYPE, PDF_MEDIA_TYPE, content_disposition, curriculum_to_docx, curriculum_to_pdf, export_filename
from ..flows import analyze_and_grade_paper, create_curriculum, generate_quiz
from ..flows.curriculum import CreateCurriculumInput, CreateCurriculumOutput
from ..flows.grading import AnalyzeAndGradePaperInput, AnalyzeAndGradePaperOutput
from ..flows.quiz import GenerateQuizInput, GenerateQuizOutput
from ..gemini_client import GeminiClient
from ..session import SessionUser
from .pages import feature_page, get_llm_client, require_role, run_form
from .student import first_name

router = APIRouter(prefix="/teacher", tags=["teacher"])

require_teacher = require_role(TEACHER)


@router.get("/dashboard")
async def dashboard(user: SessionUser = Depends(require_teacher)):
	name = first_name(user, "Teacher")
	return feature_page(
		user,
		"Teacher Dashboard",
		f"Welcome back, {name}! Insights to enhance your teaching effectiveness.",
		metrics=TEACHER_METRICS,
		classPerformance=CLASS_PERFORMANCE,
		gradingStatus=GRADING_STATUS,
		recentActivity=RECENT_ACTIVITY,
	)


@router.get("/paper-checker")
async def paper_checker_page(user: SessionUser = Depends(require_teacher)):
	return feature_page(
		user,
		"AI Paper Checker",
		"Analyze, assess, and grade student papers efficiently with AI assistance.",
	)


@router.post("/paper-checker", response_model=AnalyzeAndGradePaperOutput, response_model_exclude_none=True)
async def paper_checker_submit(req: AnalyzeAndGradePaperInput, user: SessionUser = Depends(require_teacher), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(analyze_and_grade_paper(req, client=client))


@router.get("/quiz-maker")
async def quiz_maker_page(user: SessionUser = Depends(require_teacher)):
	return feature_page(
		user,
		"AI Quiz Maker",
		"Create diverse and engaging assessments with varying difficulty levels powered by AI.",
		defaults={"topic": "", "numQuestions": 5, "difficulty": "medium"},
	)


@router.post("/quiz-maker", response_model=GenerateQuizOutput)
async def quiz_maker_submit(req: GenerateQuizInput, user: SessionUser = Depends(require_teacher), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(generate_quiz(req, client=client))


@router.get("/curriculum-creator")
async def curriculum_creator_page(user: SessionUser = Depends(require_teacher)):
	return feature_page(
		user,
		"AI Curriculum Creator",
		"Automate the creation of curriculum outlines based on subject matter and learning objectives.",
		exportFormats=["pdf", "docx"],
	)


@router.post("/curriculum-creator", response_model=CreateCurriculumOutput)
async def curriculum_creator_submit(req: CreateCurriculumInput, user: SessionUser = Depends(require_teacher), client: Optional[GeminiClient] = Depends(get_llm_client)):
	return await run_form(create_curriculum(req, client=client))


@router.post("/curriculum-creator/export")
async def curriculum_export(
	curriculum: CreateCurriculumOutput,
	format: Literal["pdf", "docx"] = "pdf",
	user: SessionUser = Depends(require_teacher),
):
	if format == "docx":
		content, media_type = curriculum_to_docx(curriculum), DOCX_MEDIA_TYPE
	else:
		content, media_type = curriculum_to_pdf(curriculum), PDF_MEDIA_TYPE
	filename = export_filename(curriculum.title, format)
	return Response(
		content=content,
		media_type=media_type,
		headers={"Content-Disposition": content_disposition(filename)},
	)

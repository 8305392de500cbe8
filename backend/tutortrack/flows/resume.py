from __future__ import annotations
from typing import Any, Mapping, Optional, Union

from pydantic import Field

from ..gemini_client import GeminiClient
from .base import FlowInput, FlowModel, parse_input, run_flow


class ResumeBuilderInput(FlowInput):
	full_name: str = Field(min_length=2, description="The user's full name.")
	contact_info: str = Field(min_length=5, description="Email, phone number and profile links.")
	work_experience: str = Field(min_length=10, description="Past roles, responsibilities and accomplishments.")
	education: str = Field(min_length=5, description="Degrees, schools and graduation years.")
	skills: str = Field(min_length=3, description="Technical and soft skills.")
	job_description: str = Field(min_length=20, description="The description of the job being applied for.")


class ResumeBuilderOutput(FlowModel):
	resume_content: str = Field(description="The full resume in Markdown format.")
	cover_letter_content: str = Field(description="The tailored cover letter.")


def _build_resume_prompt(req: ResumeBuilderInput) -> str:
	return (
		"You are an expert career coach and professional resume writer. Your task is to generate a professional resume "
		"and a tailored cover letter based on the user's information and the provided job description.\n\n"
		"User Information:\n"
		f"- Full Name: {req.full_name}\n"
		f"- Contact Info: {req.contact_info}\n"
		f"- Work Experience: {req.work_experience}\n"
		f"- Education: {req.education}\n"
		f"- Skills: {req.skills}\n\n"
		f"Target Job Description:\n{req.job_description}\n\n"
		"Instructions:\n"
		"1. Resume: Create a clean, professional resume in Markdown format. Start with the user's name and contact information. "
		"Follow with a professional summary, skills, work experience, and education sections. Tailor the language to highlight "
		"the most relevant aspects of the user's profile for the target job. Use bullet points for accomplishments in the work experience section.\n"
		"2. Cover Letter: Write a compelling and professional cover letter addressed generically (e.g., \"Dear Hiring Manager,\"). "
		"It must express enthusiasm for the role, briefly introduce the user, highlight 2-3 key skills or experiences that directly "
		"match the job requirements, and end with a strong call to action. Keep the tone professional and confident.\n\n"
		"Output the resume and cover letter content in their respective fields."
	)


async def build_resume_and_cover_letter(
	data: Union[ResumeBuilderInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> ResumeBuilderOutput:
	req = parse_input(ResumeBuilderInput, data)
	return await run_flow(
		"build_resume_and_cover_letter",
		_build_resume_prompt(req),
		ResumeBuilderOutput,
		client=client,
		failure_message="Failed to build resume and cover letter. Please try again.",
	)

"""Student guidance flows: assignment help, career coaching and skills planning."""
from __future__ import annotations
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import Field

from ..gemini_client import GeminiClient
from .base import FlowInput, FlowModel, optional, parse_input, run_flow

StudentLevel = Literal["middle_school", "high_school", "undergraduate", "graduate", "other"]


class AssignmentHelpInput(FlowInput):
	assignment_details: str = Field(
		min_length=30,
		description="Detailed information about the assignment, including instructions, context, and specific problems.",
	)
	student_level: StudentLevel = Field(description="The student level (e.g., high school, undergraduate, graduate).")
	subject: Optional[str] = Field(default=None, description="The subject the assignment belongs to.")
	specific_question: Optional[str] = Field(default=None, description="A specific question the student has about the assignment.")


class AssignmentHelpOutput(FlowModel):
	explanation: str = Field(description="An explanation of the relevant concepts or problems.")
	suggestions: str = Field(description="Suggestions and guidance for completing the assignment.")
	hint: Optional[str] = Field(default=None, description="A helpful hint to guide the student if they are stuck.")


def _build_assignment_help_prompt(req: AssignmentHelpInput) -> str:
	return (
		"You are an AI-powered assignment assistant designed to help students with their assignments.\n\n"
		"You will analyze the assignment details and the student's level to provide helpful explanations, suggestions, and guidance.\n"
		"If the student has a specific question, you will address it directly.\n\n"
		"Consider offering hints if the student seems stuck, but don't give away the answer directly.\n\n"
		f"Assignment Details: {req.assignment_details}\n"
		f"Student Level: {req.student_level.replace('_', ' ')}\n"
		f"Subject: {optional(req.subject)}\n"
		f"Specific Question: {optional(req.specific_question)}\n\n"
		"Explanation: An explanation of the relevant concepts or problems.\n"
		"Suggestions: Suggestions and guidance for completing the assignment.\n"
		"Hint: A helpful hint to guide the student if they are stuck."
	)


async def assignment_help(
	data: Union[AssignmentHelpInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> AssignmentHelpOutput:
	req = parse_input(AssignmentHelpInput, data)
	return await run_flow(
		"assignment_help",
		_build_assignment_help_prompt(req),
		AssignmentHelpOutput,
		client=client,
		failure_message="Failed to get assignment help. Please try again.",
	)


class CareerCoachInput(FlowInput):
	current_skills: str = Field(min_length=20, description="A detailed list or description of the user's current skills and expertise.")
	interests: str = Field(min_length=10, description="A description of the user's passions, hobbies, and areas of interest.")
	work_experience: Optional[str] = Field(default=None, description="A summary of the user's past work experience, if any.")
	career_aspirations: str = Field(min_length=10, description="What the user hopes to achieve in their career, their long-term goals.")
	preferred_work_environment: Optional[str] = Field(
		default=None,
		description="The user's preferred type of work environment (e.g., fast-paced startup, stable corporate, remote).",
	)


class CareerCoachOutput(FlowModel):
	suggested_career_paths: str = Field(description="A list of 3-5 suggested career paths tailored to the user's profile.")
	skills_to_develop: str = Field(description="A list of key skills the user should focus on developing for these paths.")
	actionable_steps: str = Field(description="Concrete next steps the user can take to start moving towards these career paths.")


def _build_career_coach_prompt(req: CareerCoachInput) -> str:
	return (
		"You are an expert AI career coach. Your goal is to provide personalized and actionable career advice.\n\n"
		"Analyze the user's comprehensive profile:\n"
		f"Current Skills: {req.current_skills}\n"
		f"Interests: {req.interests}\n"
		f"Work Experience (if any): {optional(req.work_experience)}\n"
		f"Career Aspirations: {req.career_aspirations}\n"
		f"Preferred Work Environment (if any): {optional(req.preferred_work_environment)}\n\n"
		"Based on this information:\n"
		"1. Suggest 3-5 specific career paths that align well with their profile.\n"
		"2. Identify key skills they should prioritize developing to succeed in these paths.\n"
		"3. Provide concrete, actionable next steps they can take (e.g., specific online courses, types of projects to undertake, networking advice).\n\n"
		"Output the suggested career paths, skills to develop, and actionable steps as clear, distinct sections or lists."
	)


async def career_coach(
	data: Union[CareerCoachInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> CareerCoachOutput:
	req = parse_input(CareerCoachInput, data)
	return await run_flow(
		"career_coach",
		_build_career_coach_prompt(req),
		CareerCoachOutput,
		client=client,
		failure_message="Failed to get career advice. Please try again.",
	)


class SkillsGuideInput(FlowInput):
	current_skills: str = Field(min_length=20, description="A detailed list or description of the user's current skills and proficiency levels.")
	desired_skills: str = Field(min_length=10, description="A list or description of the skills the user wants to learn or improve.")
	career_goal: Optional[str] = Field(default=None, description="The user's primary career goal that these skills will support.")
	learning_style_preference: Optional[str] = Field(
		default=None,
		description="Preferred learning style (e.g., visual, auditory, project-based, structured courses).",
	)
	time_commitment: Optional[str] = Field(default=None, description="Time per week the user can commit to learning (e.g., 5-10 hours).")


class SkillsGuideOutput(FlowModel):
	skills_analysis: str = Field(description="A brief analysis of the gap between current and desired skills, considering the career goal.")
	learning_path_suggestions: str = Field(description="A suggested learning path or strategy, broken down into manageable steps or modules.")
	recommended_resources: str = Field(description="Specific, actionable resources tailored to the desired skills and learning style.")
	milestones_and_timeline: Optional[str] = Field(
		default=None,
		description="Suggested milestones and a loose timeline, considering the time commitment if provided.",
	)


def _build_skills_guide_prompt(req: SkillsGuideInput) -> str:
	return (
		"You are an AI Skills Development Coach. Your task is to create a personalized skills guide based on the user's input.\n\n"
		"User Profile:\n"
		f"Current Skills & Proficiency: {req.current_skills}\n"
		f"Desired Skills to Learn/Improve: {req.desired_skills}\n"
		f"Career Goal (if provided): {optional(req.career_goal)}\n"
		f"Preferred Learning Style (if provided): {optional(req.learning_style_preference)}\n"
		f"Weekly Time Commitment (if provided): {optional(req.time_commitment)}\n\n"
		"Based on this information, please provide:\n"
		"1. Skills Analysis: A brief analysis of the gap between their current and desired skills, especially in relation to their career goal (if stated).\n"
		"2. Learning Path Suggestions: A structured learning path. Break this down into logical steps, modules, or focus areas.\n"
		"3. Recommended Resources: Specific and actionable learning resources such as online courses, books, hands-on projects "
		"and communities. Tailor these to the desired skills and, if possible, the user's learning style.\n"
		"4. Milestones & Timeline (Optional): If a time commitment is mentioned, suggest some achievable milestones and a general timeline.\n\n"
		"Present the information clearly, using headings or bullet points for readability. Be encouraging and practical."
	)


async def generate_skills_guide(
	data: Union[SkillsGuideInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> SkillsGuideOutput:
	req = parse_input(SkillsGuideInput, data)
	return await run_flow(
		"generate_skills_guide",
		_build_skills_guide_prompt(req),
		SkillsGuideOutput,
		client=client,
		failure_message="Failed to generate skills guide. Please try again.",
	)

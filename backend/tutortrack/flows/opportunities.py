"""Link-bearing recommendation flows: learning resources, scholarships and internships."""
from __future__ import annotations
from typing import Annotated, Any, List, Literal, Mapping, Optional, Union

from pydantic import AfterValidator, Field, HttpUrl, TypeAdapter

from ..gemini_client import GeminiClient
from .base import FlowInput, FlowModel, optional, parse_input, run_flow

_http_url = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
	# Validate without normalising so the model's URL is returned as given
	_http_url.validate_python(value)
	return value


Url = Annotated[str, AfterValidator(_check_url)]


class GenerateRecommendationsInput(FlowInput):
	learning_goals: str = Field(min_length=1, description="The specific topics, skills, or subjects the user wants to learn about.")
	current_knowledge: Optional[str] = Field(
		default=None,
		description="A brief summary of what the user already knows about the topic to identify knowledge gaps.",
	)
	recommendation_type: Literal["web_resources", "education_programs"] = Field(
		description="The type of recommendation to generate: internet-wide resources or formal education programs.",
	)


class Recommendation(FlowModel):
	title: str = Field(description="The title of the recommended resource or program.")
	type: str = Field(
		description="The type of resource (e.g., Article, Video, Interactive Tutorial, Online Course, University Program, Online Bootcamp).",
	)
	url: Url = Field(description="A valid, real, and accessible URL for the resource.")
	description: str = Field(description="A brief summary of what the resource covers and why it is being recommended.")


class GenerateRecommendationsOutput(FlowModel):
	recommendations: List[Recommendation] = Field(description="A list of 3-5 personalized recommendations.")


def _build_recommendations_prompt(req: GenerateRecommendationsInput) -> str:
	return (
		"You are an expert AI learning advisor. Your task is to generate a list of personalized learning recommendations "
		"based on the user's goals and current knowledge.\n\n"
		"Analyze the user's input to understand their learning objectives and identify potential knowledge gaps.\n\n"
		f"User's Learning Goals: {req.learning_goals}\n"
		f"User's Current Knowledge: {optional(req.current_knowledge)}\n"
		f"Type of Recommendation Requested: {req.recommendation_type}\n\n"
		"Instructions:\n"
		"1. Generate between 3 and 5 high-quality recommendations.\n"
		"2. For each recommendation, provide a title, type, a brief description, and a REAL, VERIFIABLE URL. Do not make up URLs.\n"
		"3. If the user requests 'web_resources', find a mix of high-quality articles, interactive tutorials, videos, or free/paid "
		"online courses from reputable sources (e.g., official documentation, Coursera/edX, respected blogs, YouTube channels).\n"
		"4. If the user requests 'education_programs', find relevant university degrees (undergraduate or graduate), online bootcamps, "
		"or professional certificate programs from accredited institutions or well-known providers.\n"
		"5. Tailor the description to explain why each resource is a good fit for the user's specific goals."
	)


async def generate_recommendations(
	data: Union[GenerateRecommendationsInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> GenerateRecommendationsOutput:
	req = parse_input(GenerateRecommendationsInput, data)
	return await run_flow(
		"generate_recommendations",
		_build_recommendations_prompt(req),
		GenerateRecommendationsOutput,
		client=client,
		failure_message="Failed to generate recommendations. The AI may be busy or the request could not be processed. Please try again.",
	)


class ScholarshipFinderInput(FlowInput):
	field_of_study: str = Field(min_length=2, description="The user's field of study.")
	interests: str = Field(min_length=2, description="The user's academic and career interests.")
	opportunity_type: Literal["scholarship", "internship"] = Field(description="The kind of opportunity to search for.")
	location: Optional[str] = Field(default=None, description="Preferred location, mainly relevant for internships.")


class Opportunity(FlowModel):
	title: str = Field(description="The name of the scholarship or internship.")
	organization: str = Field(description="The organization offering the opportunity.")
	type: str = Field(description="Either Scholarship or Internship.")
	description: str = Field(description="Why this opportunity fits the user's profile.")
	url: Url = Field(description="A valid, real, and accessible URL for the opportunity.")


class ScholarshipFinderOutput(FlowModel):
	opportunities: List[Opportunity] = Field(description="A list of 3-5 matching opportunities.")


def _build_opportunities_prompt(req: ScholarshipFinderInput) -> str:
	return (
		"You are an expert career and academic advisor AI. Your task is to find relevant scholarships or internships "
		"based on the user's profile.\n\n"
		"Analyze the user's input carefully.\n\n"
		f"User's Field of Study: {req.field_of_study}\n"
		f"User's Interests: {req.interests}\n"
		f"Type of Opportunity Requested: {req.opportunity_type}\n"
		f"Preferred Location: {optional(req.location)}\n\n"
		"Instructions:\n"
		"1. Generate between 3 and 5 high-quality recommendations for the requested opportunity type.\n"
		"2. For each recommendation, provide a title, the offering organization, the type (Scholarship or Internship), "
		"a brief description, and a REAL, VERIFIABLE URL. Do not make up URLs.\n"
		"3. Tailor the description to explain why each opportunity is a good fit for the user's specific profile.\n"
		"4. If location is provided for an internship search, prioritize opportunities in or compatible with that location (including remote)."
	)


async def find_opportunities(
	data: Union[ScholarshipFinderInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> ScholarshipFinderOutput:
	req = parse_input(ScholarshipFinderInput, data)
	return await run_flow(
		"find_opportunities",
		_build_opportunities_prompt(req),
		ScholarshipFinderOutput,
		client=client,
		failure_message="Failed to find opportunities. The AI may be busy or the request could not be processed. Please try again.",
	)

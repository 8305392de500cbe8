from __future__ import annotations
from typing import Any, List, Mapping, Optional, Union

from pydantic import Field

from ..gemini_client import GeminiClient
from .base import FlowInput, FlowModel, parse_input, run_flow


class CreateCurriculumInput(FlowInput):
	subject: str = Field(min_length=3, description="The subject matter for the curriculum.")
	learning_objectives: str = Field(min_length=20, description="The learning objectives for the curriculum.")


class CurriculumModule(FlowModel):
	module_number: int = Field(description="The sequential number of the module.")
	module_title: str = Field(description="The title of the module.")
	topics: List[str] = Field(description="A list of specific topics covered in this module.")
	activities: List[str] = Field(description="A list of suggested learning activities for this module.")


class CreateCurriculumOutput(FlowModel):
	title: str = Field(description="The overall title of the curriculum.")
	description: str = Field(description="A brief description of the curriculum.")
	# Kept snake_case on the wire
	learning_objectives: List[str] = Field(
		alias="learning_objectives",
		description="A list of key learning objectives for the entire curriculum.",
	)
	modules: List[CurriculumModule] = Field(description="An array of curriculum modules.")


def _build_curriculum_prompt(req: CreateCurriculumInput) -> str:
	return (
		"You are an expert curriculum designer. Your task is to create a structured and detailed curriculum outline "
		"in JSON format based on the provided subject and learning objectives.\n\n"
		f"Subject: {req.subject}\n"
		f"Primary Learning Objectives: {req.learning_objectives}\n\n"
		"Please generate a comprehensive curriculum that includes:\n"
		"1. A main title for the curriculum.\n"
		"2. A brief, engaging description of what the curriculum covers.\n"
		"3. A list of 3-5 high-level learning objectives for the entire curriculum.\n"
		"4. A series of modules (between 3 and 5), where each module contains:\n"
		"   - A module number.\n"
		"   - A clear module title.\n"
		"   - A list of specific topics to be covered.\n"
		"   - A list of suggested activities or assignments for that module.\n\n"
		"Ensure the entire output is a single, valid JSON object that strictly follows the provided output schema. "
		"Do not include any text or formatting outside of the JSON object."
	)


async def create_curriculum(
	data: Union[CreateCurriculumInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> CreateCurriculumOutput:
	req = parse_input(CreateCurriculumInput, data)
	return await run_flow(
		"create_curriculum",
		_build_curriculum_prompt(req),
		CreateCurriculumOutput,
		client=client,
		failure_message="Failed to create curriculum. Please try again.",
	)

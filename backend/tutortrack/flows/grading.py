from __future__ import annotations
from typing import Any, Mapping, Optional, Union

from pydantic import Field

from ..gemini_client import GeminiClient
from .base import FlowInput, FlowModel, optional, parse_input, run_flow


class AnalyzeAndGradePaperInput(FlowInput):
	paper_text: str = Field(min_length=100, description="The text content of the student paper.")
	assignment_instructions: str = Field(min_length=20, description="The instructions provided to the students for the assignment.")
	grading_rubric: str = Field(min_length=20, description="The rubric to be used for grading the paper.")
	additional_context: Optional[str] = Field(default=None, description="Additional context that might help in grading the paper.")


class AnalyzeAndGradePaperOutput(FlowModel):
	grade: str = Field(description="The grade assigned to the paper.")
	feedback: str = Field(description="Detailed feedback on the paper, including strengths and areas for improvement.")
	score_breakdown: Optional[str] = Field(default=None, description="A breakdown of the score based on the grading rubric, if applicable.")
	suggestions: Optional[str] = Field(default=None, description="Suggestions for the student to improve their writing or understanding of the material.")


def _build_grading_prompt(req: AnalyzeAndGradePaperInput) -> str:
	return (
		"You are an AI paper checker designed to assist teachers in grading student papers. "
		"Your task is to analyze the paper based on the provided assignment instructions, grading rubric, and any additional context. "
		"Provide a grade, detailed feedback, a score breakdown (if applicable), and suggestions for improvement.\n\n"
		f"Assignment Instructions: {req.assignment_instructions}\n"
		f"Grading Rubric: {req.grading_rubric}\n"
		f"Additional Context: {optional(req.additional_context)}\n\n"
		f"Paper Text:\n{req.paper_text}"
	)


async def analyze_and_grade_paper(
	data: Union[AnalyzeAndGradePaperInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> AnalyzeAndGradePaperOutput:
	req = parse_input(AnalyzeAndGradePaperInput, data)
	return await run_flow(
		"analyze_and_grade_paper",
		_build_grading_prompt(req),
		AnalyzeAndGradePaperOutput,
		client=client,
		failure_message="Failed to analyze paper. Please try again.",
	)

"""Multiple-choice quiz generation for teachers and self-practice for students."""
from __future__ import annotations
from typing import Any, List, Literal, Mapping, Optional, Union

from pydantic import Field, model_validator

from ..gemini_client import GeminiClient
from .base import FlowInput, FlowModel, parse_input, run_flow

Difficulty = Literal["easy", "medium", "hard"]

QUIZ_FAILURE = "Failed to generate quiz. Please check your input or try again. The AI might have returned an invalid format."


class GenerateQuizInput(FlowInput):
	topic: str = Field(min_length=3, description="The topic of the quiz.")
	num_questions: int = Field(ge=1, le=20, description="The number of questions in the quiz (1-20).")
	difficulty: Difficulty = Field(description="The difficulty level of the quiz.")


class PracticeQuizInput(GenerateQuizInput):
	num_questions: int = Field(ge=1, le=10, description="The number of questions in a practice quiz (1-10).")


class QuizQuestion(FlowModel):
	question: str = Field(description="The question text.")
	options: List[str] = Field(min_length=2, description="An array of possible answers.")
	answer: str = Field(description="The correct answer, which must be one of the options.")

	@model_validator(mode="after")
	def _answer_is_an_option(self) -> "QuizQuestion":
		if self.answer not in self.options:
			raise ValueError("answer must be one of the options")
		return self


class GenerateQuizOutput(FlowModel):
	quiz: List[QuizQuestion] = Field(description="An array of question objects that form the quiz.")


def _build_quiz_prompt(req: GenerateQuizInput) -> str:
	return (
		"You are a quiz generator for teachers. "
		f"Generate a quiz on the topic of {req.topic} with {req.num_questions} questions "
		f"and a difficulty level of {req.difficulty}.\n\n"
		'The output must be a single JSON object with a key named "quiz". This key should contain an array of question objects. '
		'Each question object must have the following keys: "question", "options" (an array of strings), '
		'and "answer" (a string that is one of the options).\n\n'
		"Example Quiz Format:\n"
		"{\n"
		'  "quiz": [\n'
		'    {"question": "What is the capital of France?", "options": ["Berlin", "Paris", "Madrid", "Rome"], "answer": "Paris"},\n'
		'    {"question": "What is the value of PI?", "options": ["3.14", "3.12", "2.12", "1.01"], "answer": "3.14"}\n'
		"  ]\n"
		"}\n\n"
		"Ensure the entire output is a single, valid JSON object and nothing else."
	)


async def generate_quiz(
	data: Union[GenerateQuizInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> GenerateQuizOutput:
	req = parse_input(GenerateQuizInput, data)
	return await run_flow(
		"generate_quiz",
		_build_quiz_prompt(req),
		GenerateQuizOutput,
		client=client,
		failure_message=QUIZ_FAILURE,
	)


async def generate_practice_quiz(
	data: Union[PracticeQuizInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> GenerateQuizOutput:
	req = parse_input(PracticeQuizInput, data)
	return await run_flow(
		"generate_practice_quiz",
		_build_quiz_prompt(req),
		GenerateQuizOutput,
		client=client,
		failure_message=QUIZ_FAILURE,
	)


class QuizScore(FlowModel):
	score: int
	total: int
	correct: List[bool]


def score_quiz(quiz: GenerateQuizOutput, answers: Mapping[int, str]) -> QuizScore:
	"""Mark a submitted practice quiz; unanswered questions count as wrong."""
	correct = [answers.get(i) == q.answer for i, q in enumerate(quiz.quiz)]
	return QuizScore(score=sum(correct), total=len(correct), correct=correct)

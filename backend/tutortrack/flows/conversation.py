from __future__ import annotations
from typing import Any, Mapping, Optional, Union

from pydantic import Field

from ..gemini_client import GeminiClient
from ..settings import settings
from .base import FlowInput, FlowModel, parse_input, run_flow


class GenerateResponseInput(FlowInput):
	prompt: str = Field(min_length=1, description="The user's message or question.")


class GenerateResponseOutput(FlowModel):
	response: str = Field(description="The AI-generated response.")


class SummarizeChatTitleInput(FlowInput):
	conversation_snippet: str = Field(
		min_length=1,
		description="The first few messages of a conversation (e.g., user query and AI response).",
	)


class SummarizeChatTitleOutput(FlowModel):
	title: str = Field(min_length=1, description="A concise title for the conversation, ideally 3-5 words long.")


async def generate_response(
	data: Union[GenerateResponseInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> GenerateResponseOutput:
	req = parse_input(GenerateResponseInput, data)
	prompt = (
		f"You are a helpful AI assistant for the {settings.app_name} platform. Respond to the user's prompt.\n\n"
		f"User Prompt:\n{req.prompt}\n\n"
		"AI Response:"
	)
	return await run_flow(
		"generate_response",
		prompt,
		GenerateResponseOutput,
		client=client,
		failure_message="The assistant could not reply. Please try again.",
	)


async def summarize_chat_title(
	data: Union[SummarizeChatTitleInput, Mapping[str, Any]],
	*,
	client: Optional[GeminiClient] = None,
) -> SummarizeChatTitleOutput:
	req = parse_input(SummarizeChatTitleInput, data)
	prompt = (
		"You are an expert at summarizing conversations. Given the following snippet from the beginning of a chat, "
		"generate a very concise and representative title for the entire conversation. The title should be 3-5 words long.\n\n"
		f"Conversation Snippet:\n{req.conversation_snippet}\n\n"
		"Title:"
	)
	return await run_flow(
		"summarize_chat_title",
		prompt,
		SummarizeChatTitleOutput,
		client=client,
		failure_message="Could not automatically generate a title for this chat.",
	)

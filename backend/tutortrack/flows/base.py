from __future__ import annotations
import logging
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from ..gemini_client import GeminiClient, GeminiError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class FlowModel(BaseModel):
	# Wire names are camelCase; Python attributes stay snake_case
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FlowInput(FlowModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class FlowError(Exception):
	"""A flow failed after its input was accepted.

	``message`` is safe to show to the user; the cause is chained.
	"""

	def __init__(self, flow: str, message: str) -> None:
		super().__init__(message)
		self.flow = flow
		self.message = message


class FlowNotConfigured(FlowError):
	"""No model client could be built, e.g. the API key is missing."""


def parse_input(model: Type[M], data: Union[M, Mapping[str, Any]]) -> M:
	"""Validate flow input. Raises ``pydantic.ValidationError`` before any model call."""
	if isinstance(data, model):
		return data
	return model.model_validate(data)


def optional(value: Optional[str]) -> str:
	return value or ""


async def run_flow(
	name: str,
	prompt: str,
	output_model: Type[M],
	*,
	client: Optional[GeminiClient] = None,
	failure_message: str = "The request could not be completed. Please try again.",
) -> M:
	"""Send one prompt with the output schema and validate the structured reply."""
	owns_client = client is None
	if owns_client:
		try:
			client = GeminiClient()
		except ValueError as exc:
			logger.error("%s: %s", name, exc)
			raise FlowNotConfigured(name, failure_message) from exc
	try:
		raw = await client.generate_structured(prompt, output_model.model_json_schema())
		return output_model.model_validate(raw)
	except ValidationError as exc:
		logger.warning("%s: model output failed validation: %s", name, exc)
		raise FlowError(name, failure_message) from exc
	except GeminiError as exc:
		logger.warning("%s: %s", name, exc)
		raise FlowError(name, failure_message) from exc
	finally:
		if owns_client:
			await client.aclose()

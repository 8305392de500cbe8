from __future__ import annotations
import json
import logging
import re
import httpx
from typing import Any, Dict, Optional
from .settings import settings

logger = logging.getLogger(__name__)

# Keywords the Gemini responseSchema (an OpenAPI subset) accepts
_SCHEMA_KEYS = {
	"type",
	"description",
	"nullable",
	"enum",
	"items",
	"properties",
	"required",
	"minItems",
	"maxItems",
	"minimum",
	"maximum",
}


class GeminiError(RuntimeError):
	pass


def to_response_schema(schema: Dict[str, Any], defs: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
	"""Convert a pydantic JSON schema into Gemini's responseSchema dialect.

	References are inlined, ``Optional[X]`` becomes ``X`` with ``nullable`` and
	keywords Gemini rejects (title, default, format, $defs...) are dropped.
	"""
	if defs is None:
		defs = schema.get("$defs", {})
	if "$ref" in schema:
		name = schema["$ref"].rsplit("/", 1)[-1]
		merged = {**defs[name], **{k: v for k, v in schema.items() if k != "$ref"}}
		return to_response_schema(merged, defs)
	if "anyOf" in schema:
		variants = [s for s in schema["anyOf"] if s.get("type") != "null"]
		out = to_response_schema(variants[0], defs) if variants else {"type": "STRING"}
		if len(variants) != len(schema["anyOf"]):
			out["nullable"] = True
		if "description" in schema:
			out["description"] = schema["description"]
		return out
	out: Dict[str, Any] = {}
	for key, value in schema.items():
		if key not in _SCHEMA_KEYS:
			continue
		if key == "properties":
			out[key] = {name: to_response_schema(sub, defs) for name, sub in value.items()}
		elif key == "items":
			out[key] = to_response_schema(value, defs)
		elif key == "type":
			out[key] = str(value).upper()
		else:
			out[key] = value
	return out


def extract_json(text: str) -> Any:
	try:
		return json.loads(text)
	except ValueError:
		pass
	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			return json.loads(code_block.group(1))
		except ValueError:
			pass
	first = text.find("{")
	last = text.rfind("}")
	if first != -1 and last > first:
		try:
			return json.loads(text[first : last + 1])
		except ValueError:
			pass
	raise GeminiError("Gemini did not return valid JSON")


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = httpx.AsyncClient(timeout=settings.llm_timeout_seconds, transport=transport)

	async def generate(self, prompt: str) -> str:
		payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
		return await self._post_payload(payload)

	async def generate_structured(self, prompt: str, schema: Dict[str, Any]) -> Any:
		"""Ask for JSON matching ``schema`` (a pydantic JSON schema) and parse it."""
		payload: Dict[str, Any] = {
			"contents": [{"role": "user", "parts": [{"text": prompt}]}],
			"generationConfig": {
				"responseMimeType": "application/json",
				"responseSchema": to_response_schema(schema),
			},
		}
		text = await self._post_payload(payload)
		return extract_json(text)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			logger.warning("Gemini returned HTTP %s", http_err.response.status_code)
			raise GeminiError(f"Gemini request failed with status {http_err.response.status_code}") from http_err
		except httpx.RequestError as net_err:
			raise GeminiError(f"Gemini request failed: {net_err}") from net_err
		try:
			data = r.json()
			parts = data["candidates"][0]["content"]["parts"]
		except (ValueError, KeyError, IndexError, TypeError) as err:
			raise GeminiError(f"Unexpected Gemini response: {r.text[:500]}") from err
		text = "".join(p.get("text", "") for p in parts if not p.get("thought"))
		if not text:
			raise GeminiError("Gemini returned an empty response")
		return text

	async def aclose(self) -> None:
		await self._client.aclose()


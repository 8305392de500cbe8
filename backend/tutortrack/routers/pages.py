from __future__ import annotations
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from ..constants import APP_NAME, NAV_ITEMS_BY_ROLE, ROLES, dashboard_path
from ..flows import FlowError, FlowNotConfigured
from ..gemini_client import GeminiClient
from ..session import SessionUser
from .auth import get_optional_user

router = APIRouter(tags=["pages"])

logger = logging.getLogger(__name__)

T = TypeVar("T")

LLM_UNAVAILABLE = "The AI service is not configured."


class PageRedirect(Exception):
	"""Raised by page guards; rendered as a 303 to ``location``."""

	def __init__(self, location: str) -> None:
		super().__init__(location)
		self.location = location


async def page_redirect_handler(request, exc: PageRedirect) -> RedirectResponse:
	return RedirectResponse(url=exc.location, status_code=303)


def require_signed_in(user: Optional[SessionUser] = Depends(get_optional_user)) -> SessionUser:
	if user is None or user.role is None:
		raise PageRedirect("/")
	return user


def require_role(role: str) -> Callable[..., SessionUser]:
	def guard(user: SessionUser = Depends(require_signed_in)) -> SessionUser:
		if user.role != role:
			raise PageRedirect(dashboard_path(user.role))
		return user
	return guard


async def get_llm_client() -> AsyncIterator[Optional[GeminiClient]]:
	# Without a key the flow itself reports it, after the body has been validated
	try:
		client = GeminiClient()
	except ValueError as exc:
		logger.warning("LLM client unavailable: %s", exc)
		yield None
		return
	try:
		yield client
	finally:
		await client.aclose()


async def run_form(call: Awaitable[T]) -> T:
	try:
		return await call
	except FlowNotConfigured:
		raise HTTPException(status_code=503, detail=LLM_UNAVAILABLE)
	except FlowError as exc:
		raise HTTPException(status_code=502, detail=exc.message)


def feature_page(user: SessionUser, title: str, description: str, **extra: Any) -> dict:
	return {"title": title, "description": description, "role": user.role, **extra}


@router.get("/")
async def landing(user: Optional[SessionUser] = Depends(get_optional_user)):
	redirect = dashboard_path(user.role) if user is not None and user.role else None
	return {
		"appName": APP_NAME,
		"roles": list(ROLES),
		"authOptions": ["email", "google", "guest"],
		"redirect": redirect,
	}


@router.get("/navigation")
async def navigation(user: SessionUser = Depends(require_signed_in)):
	return {"role": user.role, "items": NAV_ITEMS_BY_ROLE[user.role]}

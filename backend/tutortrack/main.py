import asyncio
import logging

from fastapi import FastAPI

from .cleanup import purge_stale_records
from .db import SessionLocal, init_db
from .documents import role_store_for
from .settings import settings
from .routers import auth, chat, pages, student, teacher
from .routers.pages import PageRedirect, page_redirect_handler

logger = logging.getLogger(__name__)

app = FastAPI(title=f"{settings.app_name} API")
app.add_exception_handler(PageRedirect, page_redirect_handler)
app.include_router(pages.router)
app.include_router(auth.router)
app.include_router(student.router)
app.include_router(teacher.router)
for chat_router in chat.routers:
	app.include_router(chat_router)


@app.get("/info")
def info():
	return {
		"status": "ok",
		"app": settings.app_name,
		"gemini_configured": bool(settings.gemini_api_key),
		"identity_backend": settings.identity_backend,
		"document_backend": settings.document_backend,
	}


def _purge_once() -> None:
	db = SessionLocal()
	try:
		purge_stale_records(db, role_store_for(db))
	except Exception:
		db.rollback()
		logger.exception("Cleanup failed")
	finally:
		db.close()


async def _cleanup_watcher():
	# Startup already ran one pass; repeat daily
	while True:
		await asyncio.sleep(24 * 60 * 60)
		_purge_once()


@app.on_event("startup")
async def startup_event():
	logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
	init_db()
	_purge_once()
	asyncio.create_task(_cleanup_watcher())

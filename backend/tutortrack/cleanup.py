from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import delete
from sqlalchemy.orm import Session

from .chat import chat_history
from .documents import RoleStore, role_store_for
from .models import AuthSession, AuthUser
from .settings import settings

logger = logging.getLogger(__name__)


def purge_stale_records(db: Session, roles: Optional[RoleStore] = None, now: Optional[datetime] = None) -> int:
	threshold = (now or datetime.utcnow()) - timedelta(days=settings.guest_retention_days)
	roles = roles if roles is not None else role_store_for(db)
	removed = 0

	# Idle sessions are revoked regardless of account type
	res = db.execute(delete(AuthSession).where(AuthSession.last_activity_at < threshold))
	removed += res.rowcount or 0
	db.commit()

	# Guests that never upgraded: drop the account, its role document and its chats
	stale_guests = db.query(AuthUser).filter(AuthUser.is_anonymous.is_(True), AuthUser.updated_at < threshold).all()
	for guest in stale_guests:
		has_session = db.query(AuthSession).filter(AuthSession.uid == guest.uid).first() is not None
		if has_session:
			continue
		uid = guest.uid
		roles.delete(uid)
		chat_history.clear(uid)
		res = db.execute(delete(AuthUser).where(AuthUser.uid == uid))
		removed += res.rowcount or 0

	db.commit()
	if removed:
		logger.info("Purged %d stale records", removed)
	return removed

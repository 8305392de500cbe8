"""Role documents: one ``{role}`` document per uid."""
from __future__ import annotations
import logging
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from sqlalchemy.orm import Session

from .constants import ROLES
from .models import UserRole
from .settings import settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


def normalize_role(value: Optional[str]) -> str:
	role = (value or "").strip().lower()
	if role not in ROLES:
		raise ValueError(f"role must be one of {list(ROLES)}")
	return role


class RoleStore:
	def get_role(self, uid: str) -> Optional[str]:
		raise NotImplementedError

	def set_role(self, uid: str, role: str) -> str:
		raise NotImplementedError

	def delete(self, uid: str) -> None:
		raise NotImplementedError


class SqlRoleStore(RoleStore):
	def __init__(self, db: Session) -> None:
		self.db = db

	def get_role(self, uid: str) -> Optional[str]:
		row = self.db.get(UserRole, uid)
		return row.role if row else None

	def set_role(self, uid: str, role: str) -> str:
		role = normalize_role(role)
		row = self.db.get(UserRole, uid)
		if row is None:
			self.db.add(UserRole(uid=uid, role=role))
		elif row.role != role:
			row.role = role
		self.db.commit()
		return role

	def delete(self, uid: str) -> None:
		row = self.db.get(UserRole, uid)
		if row is not None:
			self.db.delete(row)
			self.db.commit()


def _firebase_app() -> firebase_admin.App:
	try:
		return firebase_admin.get_app()
	except ValueError:
		pass
	if settings.firebase_credentials_file:
		cred = credentials.Certificate(settings.firebase_credentials_file)
	else:
		cred = credentials.ApplicationDefault()
	options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
	return firebase_admin.initialize_app(cred, options)


class FirestoreRoleStore(RoleStore):
	def __init__(self, client: Any = None) -> None:
		self.client = client if client is not None else firestore.client(_firebase_app())

	def _doc(self, uid: str):
		return self.client.collection(USERS_COLLECTION).document(uid)

	def get_role(self, uid: str) -> Optional[str]:
		snapshot = self._doc(uid).get()
		if not snapshot.exists:
			return None
		role = (snapshot.to_dict() or {}).get("role")
		if role not in ROLES:
			logger.warning("Ignoring unknown role %r for %s", role, uid)
			return None
		return role

	def set_role(self, uid: str, role: str) -> str:
		role = normalize_role(role)
		self._doc(uid).set({"role": role}, merge=True)
		return role

	def delete(self, uid: str) -> None:
		self._doc(uid).delete()


def role_store_for(db: Session) -> RoleStore:
	if settings.document_backend == "firestore":
		return FirestoreRoleStore()
	return SqlRoleStore(db)

"""Role-aware sessions.

``RoleSession`` ties an identity provider and a role store together and issues
the service's own access tokens. It is built per request and handed to the
route handlers; there is no process-wide "current user".
"""
from __future__ import annotations
import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from .chat import chat_history
from .constants import dashboard_path
from .documents import RoleStore, normalize_role
from .identity import IdentityError, IdentityProvider, IdentityUser
from .models import AuthSession
from .settings import settings

logger = logging.getLogger(__name__)

PROFILE_INCOMPLETE_MESSAGE = "Your account profile is incomplete. Please sign up again."
ROLE_REQUIRED_MESSAGE = "Please select a role before signing up."
ACCOUNT_NOT_FOUND_MESSAGE = 'Please go to the "Sign Up" tab, select a role, and then sign up with Google.'


class RoleSessionError(Exception):
	"""A sign-in step failed for a reason the user can act on."""

	def __init__(self, title: str, message: str) -> None:
		super().__init__(message)
		self.title = title
		self.message = message


@dataclass
class SessionUser:
	uid: str
	session_id: str
	role: Optional[str] = None
	email: Optional[str] = None
	is_anonymous: bool = False
	display_name: Optional[str] = None
	provider_token: Optional[str] = None

	def identity(self) -> IdentityUser:
		return IdentityUser(
			uid=self.uid,
			email=self.email,
			is_anonymous=self.is_anonymous,
			display_name=self.display_name,
			id_token=self.provider_token,
		)


@dataclass
class SignInResult:
	access_token: str
	role: str
	redirect: str
	title: str
	message: str
	token_type: str = "bearer"

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


def _resolve_expiry(expires_delta: Optional[timedelta]) -> datetime:
	delta = expires_delta
	if delta is None:
		minutes = settings.access_token_expire_minutes
		delta = timedelta(minutes=minutes) if minutes > 0 else timedelta(days=30)
	now = datetime.now(timezone.utc)
	try:
		return now + delta
	except OverflowError:
		# Cap at far future but within datetime bounds
		return datetime.max.replace(tzinfo=timezone.utc)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
	to_encode = data.copy()
	to_encode.update({"exp": _resolve_expiry(expires_delta)})
	return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, *, verify_exp: bool = True) -> Optional[Dict[str, Any]]:
	try:
		payload = jwt.decode(
			token,
			settings.jwt_secret_key,
			algorithms=[settings.jwt_algorithm],
			options={"verify_exp": verify_exp},
		)
	except JWTError:
		return None
	if not payload.get("sub") or not payload.get("jti"):
		return None
	return payload


class RoleSession:
	def __init__(self, db: Session, provider: IdentityProvider, roles: RoleStore) -> None:
		self.db = db
		self.provider = provider
		self.roles = roles

	def _open_session(self, user: IdentityUser, role: str, title: str, message: str) -> SignInResult:
		session_id = uuid.uuid4().hex
		access_token = create_access_token({"sub": user.uid, "jti": session_id})
		self.db.add(AuthSession(
			session_id=session_id,
			uid=user.uid,
			is_anonymous=user.is_anonymous,
			provider_token=user.id_token,
			email=user.email,
			display_name=user.display_name,
		))
		self.db.commit()
		logger.info("Opened session for %s as %s", user.uid, role)
		return SignInResult(
			access_token=access_token,
			role=role,
			redirect=dashboard_path(role),
			title=title,
			message=message,
		)

	def _revoke(self, session_id: str) -> None:
		row = self.db.get(AuthSession, session_id)
		if row is not None:
			self.db.delete(row)
			self.db.commit()

	async def sign_up(
		self,
		email: str,
		password: str,
		role: Optional[str] = None,
		current: Optional[SessionUser] = None,
	) -> SignInResult:
		if current is not None and current.is_anonymous:
			# Keep the guest's uid and role; only the credential changes
			user = await self.provider.link_with_email(current.identity(), email, password)
			await self.provider.send_email_verification(user)
			kept_role = self.roles.get_role(user.uid) or normalize_role(role or current.role)
			self._revoke(current.session_id)
			return self._open_session(
				user,
				kept_role,
				"Account Upgraded!",
				"Your guest session has been saved. Please verify your email.",
			)
		if not role:
			raise RoleSessionError("Role not selected", ROLE_REQUIRED_MESSAGE)
		role = normalize_role(role)
		user = await self.provider.sign_up(email, password)
		await self.provider.send_email_verification(user)
		self.roles.set_role(user.uid, role)
		return self._open_session(user, role, "Account Created!", "A verification link has been sent to your email.")

	async def sign_in(self, email: str, password: str) -> SignInResult:
		user = await self.provider.sign_in(email, password)
		role = self.roles.get_role(user.uid)
		if role is None:
			await self.provider.sign_out(user)
			raise RoleSessionError("Sign In Failed", PROFILE_INCOMPLETE_MESSAGE)
		return self._open_session(user, role, "Signed In Successfully!", "Welcome back! Redirecting...")

	async def sign_in_with_provider(
		self,
		provider_id: str,
		id_token: str,
		role: Optional[str] = None,
		sign_up: bool = False,
	) -> SignInResult:
		user = await self.provider.sign_in_with_idp(provider_id, id_token)
		existing = self.roles.get_role(user.uid)
		if existing is not None:
			resolved = existing
		elif sign_up and role:
			resolved = self.roles.set_role(user.uid, role)
		else:
			await self.provider.sign_out(user)
			raise RoleSessionError("Account Not Found", ACCOUNT_NOT_FOUND_MESSAGE)
		return self._open_session(user, resolved, "Signed In with Google!", "Welcome! Redirecting...")

	async def start_guest_session(self, role: str) -> SignInResult:
		role = normalize_role(role)
		user = await self.provider.sign_in_anonymously()
		self.roles.set_role(user.uid, role)
		return self._open_session(user, role, "Guest Session Started", "You are browsing as a guest.")

	async def send_password_reset(self, email: str) -> None:
		await self.provider.send_password_reset(email)

	async def confirm_password_reset(self, code: str, new_password: str) -> None:
		await self.provider.confirm_password_reset(code, new_password)

	async def confirm_email_verification(self, code: str) -> None:
		await self.provider.confirm_email_verification(code)

	def resolve(self, token: Optional[str]) -> Optional[SessionUser]:
		if not token:
			return None
		payload = decode_access_token(token)
		if payload is None:
			return None
		row = self.db.get(AuthSession, payload["jti"])
		if row is None or row.uid != payload["sub"]:
			return None
		row.last_activity_at = datetime.utcnow()
		self.db.commit()
		return SessionUser(
			uid=row.uid,
			session_id=row.session_id,
			role=self.roles.get_role(row.uid),
			email=row.email,
			is_anonymous=bool(row.is_anonymous),
			display_name=row.display_name,
			provider_token=row.provider_token,
		)

	async def logout(self, token: Optional[str]) -> None:
		if not token:
			return
		# Expired tokens can still be logged out
		payload = decode_access_token(token, verify_exp=False)
		if payload is None:
			return
		row = self.db.get(AuthSession, payload["jti"])
		if row is None:
			return
		user = IdentityUser(uid=row.uid, email=row.email, is_anonymous=bool(row.is_anonymous), id_token=row.provider_token)
		self.db.delete(row)
		self.db.commit()
		chat_history.clear(user.uid)
		try:
			await self.provider.sign_out(user)
		except IdentityError as exc:
			logger.warning("Provider sign-out failed for %s: %s", user.uid, exc)
		logger.info("Closed session for %s", user.uid)

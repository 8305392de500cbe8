"""Identity providers.

Two backends implement the same operations:

* ``LocalIdentityProvider`` keeps accounts in the ``auth_users`` table with
  bcrypt hashes. Password-reset and verification codes are signed tokens that
  are logged instead of mailed.
* ``FirebaseIdentityProvider`` talks to the Identity Toolkit REST API with the
  project's web API key.

Errors are raised as ``IdentityError`` with the hosted provider's error codes
(``auth/invalid-credential`` ...) so callers can map them to messages.
"""
from __future__ import annotations
import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .models import AuthUser
from .settings import settings

logger = logging.getLogger(__name__)

logging.getLogger('passlib').setLevel(logging.ERROR)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 6
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."

AUTH_ERROR_MESSAGES: Dict[str, str] = {
	"auth/invalid-credential": INVALID_CREDENTIALS_MESSAGE,
	"auth/user-not-found": INVALID_CREDENTIALS_MESSAGE,
	"auth/wrong-password": INVALID_CREDENTIALS_MESSAGE,
	"auth/invalid-email": "Please enter a valid email address.",
	"auth/weak-password": "Password must be at least 6 characters long.",
	"auth/email-already-in-use": "An account with this email already exists.",
	"auth/credential-already-in-use": "This account is already linked to another user.",
	"auth/provider-already-linked": "This account already has an email and password.",
	"auth/user-disabled": "This account has been disabled.",
	"auth/too-many-requests": "Too many attempts. Please try again later.",
	"auth/operation-not-allowed": "This sign-in method is not enabled.",
	"auth/invalid-user-token": "Your session has expired. Please sign in again.",
	"auth/requires-recent-login": "Please sign in again to continue.",
	"auth/invalid-action-code": "The link is invalid or has already been used.",
	"auth/expired-action-code": "The link has expired.",
	"auth/unsupported-provider": "This sign-in provider is not supported.",
	"auth/network-request-failed": "Could not reach the authentication service.",
}

# Identity Toolkit REST error messages -> client SDK error codes
_FIREBASE_ERROR_CODES: Dict[str, str] = {
	"EMAIL_EXISTS": "auth/email-already-in-use",
	"EMAIL_NOT_FOUND": "auth/user-not-found",
	"INVALID_PASSWORD": "auth/wrong-password",
	"INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
	"INVALID_IDP_RESPONSE": "auth/invalid-credential",
	"USER_DISABLED": "auth/user-disabled",
	"WEAK_PASSWORD": "auth/weak-password",
	"INVALID_EMAIL": "auth/invalid-email",
	"MISSING_EMAIL": "auth/invalid-email",
	"MISSING_PASSWORD": "auth/weak-password",
	"TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
	"OPERATION_NOT_ALLOWED": "auth/operation-not-allowed",
	"ADMIN_ONLY_OPERATION": "auth/operation-not-allowed",
	"INVALID_ID_TOKEN": "auth/invalid-user-token",
	"USER_NOT_FOUND": "auth/user-not-found",
	"TOKEN_EXPIRED": "auth/invalid-user-token",
	"CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "auth/requires-recent-login",
	"FEDERATED_USER_ID_ALREADY_LINKED": "auth/credential-already-in-use",
	"INVALID_OOB_CODE": "auth/invalid-action-code",
	"EXPIRED_OOB_CODE": "auth/expired-action-code",
}


class IdentityError(Exception):
	def __init__(self, code: str, detail: Optional[str] = None) -> None:
		super().__init__(detail or code)
		self.code = code
		self.detail = detail

	@property
	def user_message(self) -> str:
		return AUTH_ERROR_MESSAGES.get(self.code, "Authentication failed. Please try again.")


@dataclass
class IdentityUser:
	uid: str
	email: Optional[str] = None
	is_anonymous: bool = False
	email_verified: bool = False
	display_name: Optional[str] = None
	# Provider credential for follow-up calls (Firebase ID token)
	id_token: Optional[str] = None


def validate_credentials(email: str, password: str) -> str:
	email = (email or "").strip().lower()
	if not _EMAIL_RE.match(email):
		raise IdentityError("auth/invalid-email")
	if len(password or "") < MIN_PASSWORD_LENGTH:
		raise IdentityError("auth/weak-password")
	return email


class IdentityProvider:
	async def sign_up(self, email: str, password: str) -> IdentityUser:
		raise NotImplementedError

	async def sign_in(self, email: str, password: str) -> IdentityUser:
		raise NotImplementedError

	async def sign_in_anonymously(self) -> IdentityUser:
		raise NotImplementedError

	async def sign_in_with_idp(self, provider_id: str, id_token: str) -> IdentityUser:
		raise NotImplementedError

	async def link_with_email(self, user: IdentityUser, email: str, password: str) -> IdentityUser:
		"""Attach an email/password credential to an anonymous account, keeping its uid."""
		raise NotImplementedError

	async def send_password_reset(self, email: str) -> None:
		raise NotImplementedError

	async def confirm_password_reset(self, code: str, new_password: str) -> None:
		raise NotImplementedError

	async def send_email_verification(self, user: IdentityUser) -> None:
		raise NotImplementedError

	async def confirm_email_verification(self, code: str) -> None:
		raise NotImplementedError

	async def sign_out(self, user: IdentityUser) -> None:
		# Neither backend keeps server-side sign-in state; sessions are revoked by the caller
		logger.debug("Signed out %s", user.uid)


# ---------------------------------------------------------------------------
# Local backend
# ---------------------------------------------------------------------------

_ACTION_CODE_TTL = {
	"password_reset": timedelta(hours=1),
	"verify_email": timedelta(days=3),
}


def _hash_password(password: str) -> str:
	# Truncate password to 72 bytes for bcrypt compatibility
	password_bytes = password.encode('utf-8')
	if len(password_bytes) > 72:
		password_bytes = password_bytes[:72]
	return pwd_context.hash(password_bytes.decode('utf-8', errors='ignore'))


def _verify_password(password: str, hashed: Optional[str]) -> bool:
	if not hashed:
		return False
	password_bytes = password.encode('utf-8')[:72]
	return pwd_context.verify(password_bytes.decode('utf-8', errors='ignore'), hashed)


def _to_identity(row: AuthUser) -> IdentityUser:
	return IdentityUser(
		uid=row.uid,
		email=row.email,
		is_anonymous=bool(row.is_anonymous),
		email_verified=bool(row.email_verified),
		display_name=row.display_name,
	)


class LocalIdentityProvider(IdentityProvider):
	tokeninfo_url = "https://oauth2.googleapis.com/tokeninfo"

	def __init__(self, db: Session, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		self.db = db
		self._transport = transport

	def _by_email(self, email: str) -> Optional[AuthUser]:
		return self.db.query(AuthUser).filter(AuthUser.email == email).first()

	def _create(self, **fields: Any) -> AuthUser:
		row = AuthUser(uid=uuid.uuid4().hex, **fields)
		self.db.add(row)
		self.db.commit()
		self.db.refresh(row)
		return row

	def _action_code(self, uid: str, purpose: str) -> str:
		expire = datetime.now(timezone.utc) + _ACTION_CODE_TTL[purpose]
		return jwt.encode(
			{"sub": uid, "purpose": purpose, "exp": expire},
			settings.jwt_secret_key,
			algorithm=settings.jwt_algorithm,
		)

	def _redeem(self, code: str, purpose: str) -> AuthUser:
		try:
			payload = jwt.decode(code, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
		except ExpiredSignatureError:
			raise IdentityError("auth/expired-action-code")
		except JWTError:
			raise IdentityError("auth/invalid-action-code")
		if payload.get("purpose") != purpose:
			raise IdentityError("auth/invalid-action-code")
		row = self.db.get(AuthUser, payload.get("sub"))
		if row is None:
			raise IdentityError("auth/user-not-found")
		return row

	async def sign_up(self, email: str, password: str) -> IdentityUser:
		email = validate_credentials(email, password)
		if self._by_email(email) is not None:
			raise IdentityError("auth/email-already-in-use")
		row = self._create(email=email, password_hash=_hash_password(password))
		logger.info("Created account %s", row.uid)
		return _to_identity(row)

	async def sign_in(self, email: str, password: str) -> IdentityUser:
		row = self._by_email((email or "").strip().lower())
		if row is None or not _verify_password(password or "", row.password_hash):
			raise IdentityError("auth/invalid-credential")
		return _to_identity(row)

	async def sign_in_anonymously(self) -> IdentityUser:
		row = self._create(is_anonymous=True)
		logger.info("Created guest account %s", row.uid)
		return _to_identity(row)

	async def sign_in_with_idp(self, provider_id: str, id_token: str) -> IdentityUser:
		if provider_id != "google.com":
			raise IdentityError("auth/unsupported-provider")
		claims = await self._verify_google_token(id_token)
		federated_id = f"{provider_id}:{claims['sub']}"
		row = self.db.query(AuthUser).filter(AuthUser.federated_id == federated_id).first()
		email = (claims.get("email") or "").lower() or None
		if row is None and email:
			# Same email signed up with a password first: link the Google identity to it
			row = self._by_email(email)
			if row is not None:
				row.federated_id = federated_id
				self.db.commit()
		if row is None:
			row = self._create(
				email=email,
				federated_id=federated_id,
				email_verified=str(claims.get("email_verified", "")).lower() == "true",
				display_name=claims.get("name"),
			)
		return _to_identity(row)

	async def _verify_google_token(self, id_token: str) -> Dict[str, Any]:
		try:
			async with httpx.AsyncClient(timeout=10, transport=self._transport) as client:
				r = await client.get(self.tokeninfo_url, params={"id_token": id_token})
		except httpx.RequestError as exc:
			raise IdentityError("auth/network-request-failed", str(exc)) from exc
		if r.status_code != 200:
			raise IdentityError("auth/invalid-credential")
		claims = r.json()
		if settings.google_client_id and claims.get("aud") != settings.google_client_id:
			raise IdentityError("auth/invalid-credential", "token audience mismatch")
		if not claims.get("sub"):
			raise IdentityError("auth/invalid-credential")
		return claims

	async def link_with_email(self, user: IdentityUser, email: str, password: str) -> IdentityUser:
		email = validate_credentials(email, password)
		row = self.db.get(AuthUser, user.uid)
		if row is None:
			raise IdentityError("auth/user-not-found")
		if row.password_hash:
			raise IdentityError("auth/provider-already-linked")
		if self._by_email(email) is not None:
			raise IdentityError("auth/email-already-in-use")
		row.email = email
		row.password_hash = _hash_password(password)
		row.is_anonymous = False
		self.db.commit()
		logger.info("Upgraded guest account %s", row.uid)
		return _to_identity(row)

	async def send_password_reset(self, email: str) -> None:
		row = self._by_email((email or "").strip().lower())
		if row is None:
			raise IdentityError("auth/user-not-found")
		code = self._action_code(row.uid, "password_reset")
		# No mail transport in the local backend
		logger.info("Password reset code for %s: %s", row.email, code)

	async def confirm_password_reset(self, code: str, new_password: str) -> None:
		if len(new_password or "") < MIN_PASSWORD_LENGTH:
			raise IdentityError("auth/weak-password")
		row = self._redeem(code, "password_reset")
		row.password_hash = _hash_password(new_password)
		self.db.commit()

	async def send_email_verification(self, user: IdentityUser) -> None:
		if not user.email:
			return
		code = self._action_code(user.uid, "verify_email")
		logger.info("Email verification code for %s: %s", user.email, code)

	async def confirm_email_verification(self, code: str) -> None:
		row = self._redeem(code, "verify_email")
		row.email_verified = True
		self.db.commit()


# ---------------------------------------------------------------------------
# Firebase backend
# ---------------------------------------------------------------------------

class FirebaseIdentityProvider(IdentityProvider):
	base_url = "https://identitytoolkit.googleapis.com/v1"

	def __init__(self, api_key: Optional[str] = None, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		self.api_key = api_key or settings.firebase_api_key
		if not self.api_key:
			raise ValueError("FIREBASE_API_KEY is not configured")
		self._transport = transport

	async def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
		url = f"{self.base_url}/accounts:{method}"
		try:
			async with httpx.AsyncClient(timeout=15, transport=self._transport) as client:
				r = await client.post(url, params={"key": self.api_key}, json=payload)
		except httpx.RequestError as exc:
			raise IdentityError("auth/network-request-failed", str(exc)) from exc
		if r.status_code >= 400:
			try:
				message = r.json()["error"]["message"]
			except (ValueError, KeyError, TypeError):
				message = r.text
			# Messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
			key = str(message).split(" ", 1)[0].strip(" :")
			raise IdentityError(_FIREBASE_ERROR_CODES.get(key, "auth/internal-error"), str(message))
		return r.json()

	@staticmethod
	def _to_identity(data: Dict[str, Any], *, anonymous: bool = False) -> IdentityUser:
		return IdentityUser(
			uid=data["localId"],
			email=data.get("email") or None,
			is_anonymous=anonymous,
			email_verified=bool(data.get("emailVerified", False)),
			display_name=data.get("displayName") or None,
			id_token=data.get("idToken"),
		)

	async def sign_up(self, email: str, password: str) -> IdentityUser:
		email = validate_credentials(email, password)
		data = await self._call("signUp", {"email": email, "password": password, "returnSecureToken": True})
		return self._to_identity(data)

	async def sign_in(self, email: str, password: str) -> IdentityUser:
		data = await self._call(
			"signInWithPassword",
			{"email": (email or "").strip(), "password": password or "", "returnSecureToken": True},
		)
		return self._to_identity(data)

	async def sign_in_anonymously(self) -> IdentityUser:
		data = await self._call("signUp", {"returnSecureToken": True})
		return self._to_identity(data, anonymous=True)

	async def sign_in_with_idp(self, provider_id: str, id_token: str) -> IdentityUser:
		data = await self._call(
			"signInWithIdp",
			{
				"postBody": f"id_token={id_token}&providerId={provider_id}",
				"requestUri": "http://localhost",
				"returnSecureToken": True,
				"returnIdpCredential": True,
			},
		)
		return self._to_identity(data)

	async def link_with_email(self, user: IdentityUser, email: str, password: str) -> IdentityUser:
		email = validate_credentials(email, password)
		if not user.id_token:
			raise IdentityError("auth/invalid-user-token")
		data = await self._call(
			"update",
			{"idToken": user.id_token, "email": email, "password": password, "returnSecureToken": True},
		)
		return self._to_identity(data)

	async def send_password_reset(self, email: str) -> None:
		await self._call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": (email or "").strip()})

	async def confirm_password_reset(self, code: str, new_password: str) -> None:
		await self._call("resetPassword", {"oobCode": code, "newPassword": new_password})

	async def send_email_verification(self, user: IdentityUser) -> None:
		if not user.id_token:
			raise IdentityError("auth/invalid-user-token")
		await self._call("sendOobCode", {"requestType": "VERIFY_EMAIL", "idToken": user.id_token})

	async def confirm_email_verification(self, code: str) -> None:
		await self._call("update", {"oobCode": code})

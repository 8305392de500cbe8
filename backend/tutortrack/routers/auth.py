from typing import Literal, Optional
import logging

from fastapi import APIRouter, HTTPException, Depends, Request, Response
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..db import get_db
from ..documents import RoleStore, role_store_for
from ..identity import FirebaseIdentityProvider, IdentityError, IdentityProvider, LocalIdentityProvider
from ..session import RoleSession, RoleSessionError, SessionUser, SignInResult
from ..settings import settings

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

SESSION_COOKIE = "tutortrack_session"

# Codes that mean "wrong email or password" rather than a bad request
_UNAUTHORIZED_CODES = {"auth/invalid-credential", "auth/user-not-found", "auth/wrong-password", "auth/invalid-user-token"}

Role = Literal["student", "teacher"]


def get_identity_provider(db: Session = Depends(get_db)) -> IdentityProvider:
	if settings.identity_backend == "firebase":
		try:
			return FirebaseIdentityProvider()
		except ValueError as exc:
			logger.error("Identity provider unavailable: %s", exc)
			raise HTTPException(status_code=503, detail="Sign-in is not configured.")
	return LocalIdentityProvider(db)


def get_role_store(db: Session = Depends(get_db)) -> RoleStore:
	return role_store_for(db)


def get_role_session(
	db: Session = Depends(get_db),
	provider: IdentityProvider = Depends(get_identity_provider),
	roles: RoleStore = Depends(get_role_store),
) -> RoleSession:
	return RoleSession(db, provider, roles)


def get_token(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
	# Bearer header first, then the browser cookie
	return token or request.cookies.get(SESSION_COOKIE)


def get_optional_user(
	token: Optional[str] = Depends(get_token),
	session: RoleSession = Depends(get_role_session),
) -> Optional[SessionUser]:
	return session.resolve(token)


def get_current_user(user: Optional[SessionUser] = Depends(get_optional_user)) -> SessionUser:
	if user is None:
		raise HTTPException(status_code=401, detail="Could not validate credentials", headers={"WWW-Authenticate": "Bearer"})
	return user


def _identity_http_error(exc: IdentityError) -> HTTPException:
	status = 401 if exc.code in _UNAUTHORIZED_CODES else 400
	logger.info("Identity error %s: %s", exc.code, exc.detail or "")
	return HTTPException(status_code=status, detail=exc.user_message)


def _session_http_error(exc: RoleSessionError) -> HTTPException:
	return HTTPException(status_code=400, detail={"title": exc.title, "message": exc.message})


def _issue(response: Response, result: SignInResult) -> dict:
	response.set_cookie(
		SESSION_COOKIE,
		result.access_token,
		httponly=True,
		samesite="lax",
		max_age=settings.access_token_expire_minutes * 60,
	)
	return result.to_dict()


class SignUpRequest(BaseModel):
	email: str
	password: str
	role: Optional[Role] = None


class ProviderSignInRequest(BaseModel):
	id_token: str
	provider_id: str = "google.com"
	role: Optional[Role] = None
	sign_up: bool = False


class GuestRequest(BaseModel):
	role: Role


class PasswordResetRequest(BaseModel):
	email: str


class PasswordResetConfirm(BaseModel):
	code: str
	new_password: str


class VerifyEmailRequest(BaseModel):
	code: str


class Me(BaseModel):
	uid: str
	email: Optional[str] = None
	role: Optional[str] = None
	is_anonymous: bool = False
	display_name: Optional[str] = None


@router.post("/signup", status_code=201)
async def signup(
	req: SignUpRequest,
	response: Response,
	current: Optional[SessionUser] = Depends(get_optional_user),
	session: RoleSession = Depends(get_role_session),
):
	try:
		result = await session.sign_up(req.email, req.password, req.role, current=current)
	except IdentityError as exc:
		raise _identity_http_error(exc)
	except RoleSessionError as exc:
		raise _session_http_error(exc)
	return _issue(response, result)


@router.post("/token")
async def login(response: Response, form_data: OAuth2PasswordRequestForm = Depends(), session: RoleSession = Depends(get_role_session)):
	try:
		result = await session.sign_in(form_data.username, form_data.password)
	except IdentityError as exc:
		raise _identity_http_error(exc)
	except RoleSessionError as exc:
		raise _session_http_error(exc)
	return _issue(response, result)


@router.post("/google")
async def google(req: ProviderSignInRequest, response: Response, session: RoleSession = Depends(get_role_session)):
	try:
		result = await session.sign_in_with_provider(req.provider_id, req.id_token, role=req.role, sign_up=req.sign_up)
	except IdentityError as exc:
		raise _identity_http_error(exc)
	except RoleSessionError as exc:
		raise _session_http_error(exc)
	return _issue(response, result)


@router.post("/guest")
async def guest(req: GuestRequest, response: Response, session: RoleSession = Depends(get_role_session)):
	try:
		result = await session.start_guest_session(req.role)
	except IdentityError as exc:
		raise _identity_http_error(exc)
	return _issue(response, result)


@router.post("/password-reset")
async def password_reset(req: PasswordResetRequest, session: RoleSession = Depends(get_role_session)):
	try:
		await session.send_password_reset(req.email)
	except IdentityError as exc:
		raise _identity_http_error(exc)
	return {
		"title": "Password Reset Email Sent",
		"message": "Please check your inbox for instructions to reset your password.",
	}


@router.post("/password-reset/confirm")
async def password_reset_confirm(req: PasswordResetConfirm, session: RoleSession = Depends(get_role_session)):
	try:
		await session.confirm_password_reset(req.code, req.new_password)
	except IdentityError as exc:
		raise _identity_http_error(exc)
	return {"ok": True}


@router.post("/verify-email")
async def verify_email(req: VerifyEmailRequest, session: RoleSession = Depends(get_role_session)):
	try:
		await session.confirm_email_verification(req.code)
	except IdentityError as exc:
		raise _identity_http_error(exc)
	return {"ok": True}


@router.get("/me", response_model=Me)
async def me(user: SessionUser = Depends(get_current_user)):
	return Me(
		uid=user.uid,
		email=user.email,
		role=user.role,
		is_anonymous=user.is_anonymous,
		display_name=user.display_name,
	)


@router.post("/logout")
async def logout(response: Response, token: Optional[str] = Depends(get_token), session: RoleSession = Depends(get_role_session)):
	await session.logout(token)
	response.delete_cookie(SESSION_COOKIE)
	return {"redirect": "/"}

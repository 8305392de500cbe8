import asyncio
import json
import logging

import httpx
import pytest

from tutortrack.identity import (
	FirebaseIdentityProvider,
	IdentityError,
	LocalIdentityProvider,
	validate_credentials,
)


def run(coro):
	return asyncio.run(coro)


def _codes(caplog, prefix):
	return [r.args[1] for r in caplog.records if r.getMessage().startswith(prefix)]


def test_validate_credentials():
	assert validate_credentials(" Ada@Example.com ", "secret1") == "ada@example.com"
	with pytest.raises(IdentityError) as exc:
		validate_credentials("not-an-email", "secret1")
	assert exc.value.code == "auth/invalid-email"
	with pytest.raises(IdentityError) as exc:
		validate_credentials("ada@example.com", "12345")
	assert exc.value.code == "auth/weak-password"


def test_local_sign_up_and_sign_in(db):
	provider = LocalIdentityProvider(db)
	created = run(provider.sign_up("ada@example.com", "secret1"))
	assert created.email == "ada@example.com"
	assert not created.is_anonymous

	signed_in = run(provider.sign_in("ADA@example.com", "secret1"))
	assert signed_in.uid == created.uid

	with pytest.raises(IdentityError) as exc:
		run(provider.sign_up("ada@example.com", "another1"))
	assert exc.value.code == "auth/email-already-in-use"


@pytest.mark.parametrize("email,password", [("ada@example.com", "wrong-pass"), ("nobody@example.com", "secret1")])
def test_local_bad_credentials_share_one_message(db, email, password):
	provider = LocalIdentityProvider(db)
	run(provider.sign_up("ada@example.com", "secret1"))
	with pytest.raises(IdentityError) as exc:
		run(provider.sign_in(email, password))
	assert exc.value.user_message == "Invalid email or password."


def test_local_guest_link_keeps_uid(db):
	provider = LocalIdentityProvider(db)
	guest = run(provider.sign_in_anonymously())
	assert guest.is_anonymous
	linked = run(provider.link_with_email(guest, "guest@example.com", "secret1"))
	assert linked.uid == guest.uid
	assert linked.email == "guest@example.com"
	assert not linked.is_anonymous
	with pytest.raises(IdentityError) as exc:
		run(provider.link_with_email(linked, "other@example.com", "secret1"))
	assert exc.value.code == "auth/provider-already-linked"


def test_local_password_reset_round_trip(db, caplog):
	caplog.set_level(logging.INFO, logger="tutortrack.identity")
	provider = LocalIdentityProvider(db)
	run(provider.sign_up("ada@example.com", "secret1"))
	run(provider.send_password_reset("ada@example.com"))
	code = _codes(caplog, "Password reset code")[0]

	run(provider.confirm_password_reset(code, "new-secret"))
	assert run(provider.sign_in("ada@example.com", "new-secret")).email == "ada@example.com"

	with pytest.raises(IdentityError) as exc:
		run(provider.confirm_email_verification(code))
	assert exc.value.code == "auth/invalid-action-code"


def test_local_email_verification(db, caplog):
	caplog.set_level(logging.INFO, logger="tutortrack.identity")
	provider = LocalIdentityProvider(db)
	user = run(provider.sign_up("ada@example.com", "secret1"))
	run(provider.send_email_verification(user))
	code = _codes(caplog, "Email verification code")[0]
	run(provider.confirm_email_verification(code))
	assert run(provider.sign_in("ada@example.com", "secret1")).email_verified


def test_local_google_sign_in_links_existing_email(db):
	def tokeninfo(request):
		assert request.url.params["id_token"] == "google-token"
		return httpx.Response(200, json={"sub": "1234", "email": "ada@example.com", "email_verified": "true", "name": "Ada L"})

	provider = LocalIdentityProvider(db, transport=httpx.MockTransport(tokeninfo))
	existing = run(provider.sign_up("ada@example.com", "secret1"))
	user = run(provider.sign_in_with_idp("google.com", "google-token"))
	assert user.uid == existing.uid
	# Second sign-in finds the account by its federated id
	assert run(provider.sign_in_with_idp("google.com", "google-token")).uid == existing.uid


def test_local_google_rejects_bad_token(db):
	provider = LocalIdentityProvider(db, transport=httpx.MockTransport(lambda r: httpx.Response(400, json={"error": "invalid_token"})))
	with pytest.raises(IdentityError) as exc:
		run(provider.sign_in_with_idp("google.com", "junk"))
	assert exc.value.code == "auth/invalid-credential"


def _firebase(handler):
	return FirebaseIdentityProvider(api_key="web-key", transport=httpx.MockTransport(handler))


def test_firebase_sign_in_posts_to_identity_toolkit():
	seen = {}

	def handler(request):
		seen["path"] = request.url.path
		seen["key"] = request.url.params["key"]
		seen["body"] = json.loads(request.content)
		return httpx.Response(200, json={"localId": "uid-1", "email": "ada@example.com", "idToken": "tok"})

	user = run(_firebase(handler).sign_in("ada@example.com", "secret1"))
	assert seen["path"] == "/v1/accounts:signInWithPassword"
	assert seen["key"] == "web-key"
	assert seen["body"]["returnSecureToken"] is True
	assert user.uid == "uid-1"
	assert user.id_token == "tok"


@pytest.mark.parametrize("message,code", [
	("INVALID_LOGIN_CREDENTIALS", "auth/invalid-credential"),
	("EMAIL_EXISTS", "auth/email-already-in-use"),
	("WEAK_PASSWORD : Password should be at least 6 characters", "auth/weak-password"),
	("SOMETHING_NEW", "auth/internal-error"),
])
def test_firebase_errors_map_to_auth_codes(message, code):
	def handler(request):
		return httpx.Response(400, json={"error": {"code": 400, "message": message}})

	with pytest.raises(IdentityError) as exc:
		run(_firebase(handler).sign_in("ada@example.com", "secret1"))
	assert exc.value.code == code


def test_firebase_anonymous_and_link():
	calls = []

	def handler(request):
		body = json.loads(request.content)
		calls.append((request.url.path, body))
		if request.url.path.endswith(":signUp"):
			return httpx.Response(200, json={"localId": "guest-1", "idToken": "guest-token"})
		return httpx.Response(200, json={"localId": "guest-1", "email": body["email"], "idToken": "linked-token"})

	provider = _firebase(handler)
	guest = run(provider.sign_in_anonymously())
	assert guest.is_anonymous
	linked = run(provider.link_with_email(guest, "ada@example.com", "secret1"))
	assert linked.uid == "guest-1"
	assert calls[1][0] == "/v1/accounts:update"
	assert calls[1][1]["idToken"] == "guest-token"


def test_firebase_requires_api_key():
	with pytest.raises(ValueError):
		FirebaseIdentityProvider(api_key=None)

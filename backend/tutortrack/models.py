from __future__ import annotations
from datetime import datetime
from sqlalchemy import Boolean, Column, String, DateTime
from .db import Base


class AuthUser(Base):
	"""Account row used by the local identity backend."""
	__tablename__ = "auth_users"
	uid = Column(String(64), primary_key=True, index=True)
	# Anonymous guests have no email or password until they upgrade
	email = Column(String(256), nullable=True, unique=True, index=True)
	password_hash = Column(String(256), nullable=True)
	email_verified = Column(Boolean, default=False, nullable=False)
	is_anonymous = Column(Boolean, default=False, nullable=False)
	# Set for accounts created through federated sign-in, e.g. "google.com:<sub>"
	federated_id = Column(String(256), nullable=True, unique=True)
	display_name = Column(String(256), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class UserRole(Base):
	"""One role document per uid, used by the sql document backend."""
	__tablename__ = "user_roles"
	uid = Column(String(128), primary_key=True, index=True)
	role = Column(String(16), nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class AuthSession(Base):
	__tablename__ = "auth_sessions"
	# JWT id of the access token
	session_id = Column(String(64), primary_key=True)
	uid = Column(String(128), nullable=False, index=True)
	is_anonymous = Column(Boolean, default=False, nullable=False)
	# Provider credentials needed for later calls (sign-out, guest upgrade)
	provider_token = Column(String(2048), nullable=True)
	email = Column(String(256), nullable=True)
	display_name = Column(String(256), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	last_activity_at = Column(DateTime, default=datetime.utcnow, nullable=False)

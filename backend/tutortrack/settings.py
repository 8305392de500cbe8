from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	app_name: str = Field(default="TutorTrack.ai", validation_alias="APP_NAME")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")
	llm_timeout_seconds: float = Field(default=60, validation_alias="LLM_TIMEOUT_SECONDS")

	# Access tokens issued by this service after the identity provider accepts a sign-in
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	access_token_expire_minutes: int = Field(default=120, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

	# "local" keeps accounts in the database; "firebase" uses the Identity Toolkit REST API
	identity_backend: str = Field(default="local", validation_alias="IDENTITY_BACKEND")
	# "sql" keeps role documents in the database; "firestore" uses firebase-admin
	document_backend: str = Field(default="sql", validation_alias="DOCUMENT_BACKEND")
	firebase_api_key: str | None = Field(default=None, validation_alias="FIREBASE_API_KEY")
	firebase_project_id: str | None = Field(default=None, validation_alias="FIREBASE_PROJECT_ID")
	firebase_credentials_file: str | None = Field(default=None, validation_alias="FIREBASE_CREDENTIALS_FILE")
	# Audience checked when verifying Google ID tokens with the local backend
	google_client_id: str | None = Field(default=None, validation_alias="GOOGLE_CLIENT_ID")

	# Guest accounts and idle sessions older than this are purged
	guest_retention_days: int = Field(default=7, validation_alias="GUEST_RETENTION_DAYS")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()

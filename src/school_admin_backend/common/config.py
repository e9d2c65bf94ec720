'''
Holds all the configurations
'''
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """
    Manages application configuration using environment variables.
    """
    # Application Metadata
    APP_NAME: str = "School Admin Backend"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "The backend API for the school administration platform and its parent portal."
    TEST_MODE: bool = False

    # Database URL
    DATABASE_URL: str
    DATABASE_URL_TEST: str = "sqlite+aiosqlite:///./school_admin_test.db"
    AUTO_CREATE_TABLES: bool = False
    @property
    def database_url(self) -> str:
        """
        Dynamically returns the correct database URL based on the test_mode flag.
        """
        if self.TEST_MODE:
            return self.DATABASE_URL_TEST
        return self.DATABASE_URL

    # JWT Settings
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    EMAIL_CONFIRM_EXPIRE_MINUTES: int = 60 * 24
    PASSWORD_RESET_EXPIRE_MINUTES: int = 30

    BACKEND_CORS_ORIGINS: list[str] = []

    # Outgoing mail (account confirmation, password reset)
    FRONTEND_URL: str = "http://localhost:3000"
    SMTP_SERVER: str = ""
    SMTP_PORT: int = 587
    SMTP_EMAIL: str = ""
    SMTP_PASSWORD: str = ""

    # Media host (student photos)
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    PHOTO_FOLDER: str = "eleves"

    # Dashboard
    RECENT_ENROLLMENTS_LIMIT: int = 7
    DASHBOARD_MONTHS: int = 6

    # Realtime
    REALTIME_LOOKUP_CONCURRENCY: int = 3
    REALTIME_QUEUE_SIZE: int = 100

    class Config:
        env_file = ".env" # automatically loads the .env

# Create a single, importable instance of the settings
settings = Settings()

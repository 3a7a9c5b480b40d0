import os
from dotenv import load_dotenv
load_dotenv()

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///recruiting.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "Recruitment Team")
    UID_DOMAIN = os.getenv("UID_DOMAIN", "example.local")
    INTERVIEW_LOCATION = os.getenv("INTERVIEW_LOCATION", "Video Call")
    NOTIFY_BATCH_SIZE = int(os.getenv("NOTIFY_BATCH_SIZE", "100"))
    CRON_SECRET = os.getenv("CRON_SECRET")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # JSON API: forms are validated without CSRF tokens
    WTF_CSRF_ENABLED = False


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    REDIS_URL = None
    SENDGRID_API_KEY = None
    CRON_SECRET = None

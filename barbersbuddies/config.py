# noqa: E402
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

RUNNING_TESTS = "pytest" in sys.modules or os.environ.get("TESTING") == "True"

# In case pytest tests/ -v -s is run, it will only read .env.test
if RUNNING_TESTS:
    test_env_path = Path(__file__).parent.parent / "tests" / ".env.test"
    if test_env_path.exists():
        load_dotenv(test_env_path, override=True)
        print(f" Loaded test environment from: {test_env_path}")

DEFAULT_ALLOWED_ORIGINS = [
    "https://barbersbuddies.com",
    "https://www.barbersbuddies.com",
    "http://localhost:3000",
]


def is_production_database(db_url: str) -> bool:
    """Check if a database URL appears to be production."""
    if not db_url:
        return False

    dangerous_patterns = [
        "railway.app",
        "railway.internal",
        "rlwy.net",
        "production",
        "live",
        "amazonaws.com",
        "azure.com",
        "googleapis.com",
    ]

    for pattern in dangerous_patterns:
        if pattern in db_url.lower():
            return True
    return False


def normalize_database_url(url):
    """Point bare mysql:// URLs at the pymysql driver."""
    if url and url.startswith("mysql://"):
        return url.replace("mysql://", "mysql+pymysql://", 1)
    return url


def parse_origins(raw):
    if not raw:
        return list(DEFAULT_ALLOWED_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _env_flag(name, default="False"):
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _database_url():
    url = os.environ.get("DATABASE_URL") or os.environ.get("MYSQL_PUBLIC_URL")
    if not url:
        if os.environ.get("FLASK_ENV") == "development":
            url = "sqlite:///barbersbuddies_dev.db"
            print("  DATABASE_URL not set, using local development database")
        else:
            url = "sqlite:///barbersbuddies.db"
            print("  DATABASE_URL not set, falling back to local sqlite file")
    return normalize_database_url(url)


class Config:
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get("SECRET_KEY", "supersecretdevkey123")
    TESTING = False

    # CORS allow-list for the browser front-end
    ALLOWED_ORIGINS = parse_origins(os.environ.get("ALLOWED_ORIGINS"))

    # Resend
    RESEND_API_KEY = os.environ.get("RESEND_API_KEY")
    MAIL_FROM_BOOKINGS = os.environ.get(
        "MAIL_FROM_BOOKINGS", "BarbersBuddies <bookings@barbersbuddies.com>"
    )
    MAIL_FROM_REMINDERS = os.environ.get(
        "MAIL_FROM_REMINDERS", "BarbersBuddies <reminders@barbersbuddies.com>"
    )
    MAIL_FROM_NOREPLY = os.environ.get(
        "MAIL_FROM_NOREPLY", "BarbersBuddies <noreply@barbersbuddies.com>"
    )
    FRONTEND_URL = os.environ.get("FRONTEND_URL", "https://barbersbuddies.com")
    CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "€")

    # Firebase Cloud Messaging
    FCM_ENABLED = _env_flag("FCM_ENABLED")
    FIREBASE_CREDENTIALS = os.environ.get("FIREBASE_CREDENTIALS")
    FIREBASE_PROJECT_ID = os.environ.get("FIREBASE_PROJECT_ID")

    # Background jobs
    SCHEDULER_ENABLED = _env_flag("SCHEDULER_ENABLED", "True") and not RUNNING_TESTS
    REMINDER_INTERVAL_MINUTES = int(os.environ.get("REMINDER_INTERVAL_MINUTES", 60))
    OUTBOX_INTERVAL_SECONDS = int(os.environ.get("OUTBOX_INTERVAL_SECONDS", 60))
    OUTBOX_MAX_ATTEMPTS = int(os.environ.get("OUTBOX_MAX_ATTEMPTS", 5))
    OUTBOX_BACKOFF_SECONDS = int(os.environ.get("OUTBOX_BACKOFF_SECONDS", 30))
    OUTBOX_BATCH_SIZE = int(os.environ.get("OUTBOX_BATCH_SIZE", 100))

    @property
    def is_safe_for_testing(self):
        """Double-check that we're not using production database in tests."""
        if self.TESTING:
            return not is_production_database(self.SQLALCHEMY_DATABASE_URI)
        return True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_TEST_URL", "sqlite://")
    SECRET_KEY = "test-secret-key-for-testing-only"
    RESEND_API_KEY = "re_test_key"
    FCM_ENABLED = True
    SCHEDULER_ENABLED = False
    OUTBOX_MAX_ATTEMPTS = 3
    OUTBOX_BACKOFF_SECONDS = 10


def print_config_summary(config):
    url = config.get("SQLALCHEMY_DATABASE_URI") or ""
    print("\n" + "=" * 70)
    print("CONFIGURATION SUMMARY")
    print("=" * 70)
    print(f"Environment: {os.environ.get('FLASK_ENV') or 'production'}")
    print(f"Testing Mode: {config.get('TESTING')}")
    if "@" in url:
        parts = url.split("@")
        protocol_user = parts[0].split("://")[0] + "://****:****"
        print(f"Database: {protocol_user}@{parts[1]}")
    else:
        print(f"Database: {url or 'configured'}")
    print(f"Allowed origins: {', '.join(config.get('ALLOWED_ORIGINS') or [])}")
    print(f"Email: {'enabled' if config.get('RESEND_API_KEY') else 'disabled'}")
    print(f"Push: {'enabled' if config.get('FCM_ENABLED') else 'disabled'}")
    print("=" * 70 + "\n")

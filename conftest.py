import os

# Settings are read once per process; tests must never depend on a developer's .env
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-unit-tests-only-0123456789"
os.environ.setdefault("APP_ENV", "test")
os.environ["CORS_ORIGINS"] = "http://localhost:5173"
os.environ.pop("GOOGLE_CLIENT_ID", None)
os.environ.pop("GOOGLE_CLIENT_SECRET", None)
# Unroutable port so nothing in the suite reaches a real server
os.environ["MONGO_URL"] = "mongodb://127.0.0.1:1"

"""Test package. Settings are cached on first import, so test env is fixed here."""

import os
import tempfile

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="railcare-uploads-"))
os.environ.setdefault("ALERT_EMAIL_TO", "ops@railway.in")
# Integrations stay unconfigured unless a test patches them in.
os.environ.pop("SMTP_HOST", None)
os.environ.pop("OPENAI_API_KEY", None)

import os
import tempfile

# Point the app at a throwaway SQLite database and keep language models out of tests.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="red2blue-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'red2blue-test.db')}"
os.environ["RED2BLUE_LLM_PROVIDER"] = "none"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
for _key in ("OPENAI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"):
    os.environ.pop(_key, None)

from red2blue.db import init_db  # noqa: E402

init_db()

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
BASE_DIR = Path(__file__).parent
DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
POSTS_PATH = DATA_DIR / "posts.json"
COMMENTS_PATH = DATA_DIR / "comments.json"
ABOUT_PATH = DATA_DIR / "about.json"
ADMIN_PATH = DATA_DIR / "admin.json"
UPLOADS_DIR = Path(os.getenv("UPLOADS_DIR", BASE_DIR / "public" / "uploads"))
UPLOADS_URL_PREFIX = "/uploads"

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
DEBUG = os.getenv("DEBUG", "0") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_MB", "16")) * 1024 * 1024
MAX_EXTRA_IMAGES = 20

# Auth
ADMIN_PASSWORD = os.getenv("ADMIN_PASS", "admin123")
ADMIN_HEADER = "X-Admin-Pass"

# Site defaults
DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_COMMENT_NAME = "Anonymous"
SOCIAL_KEYS = ("youtube", "github", "instagram", "twitter", "linkedin", "email")

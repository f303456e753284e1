import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths (local development only)
DATA_DIR = Path("data")
DB_PATH = DATA_DIR / "cvmatch.db"

# Database (PostgreSQL when set, SQLite otherwise)
DATABASE_URL = os.getenv("DATABASE_URL")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Document fetching
FETCH_TIMEOUT = float(os.getenv("CVMATCH_FETCH_TIMEOUT", "30"))
MAX_DOCUMENT_BYTES = int(os.getenv("CVMATCH_MAX_DOCUMENT_BYTES", str(20 * 1024 * 1024)))
USER_AGENT = "cvmatch/1.0"

# Text extraction
PDF_BACKEND = os.getenv("CVMATCH_PDF_BACKEND", "heuristic").lower()
MIN_EXTRACTED_CHARS = 100
MIN_CV_TEXT_CHARS = 50

# Scoring rubric (weights sum to 100)
SKILLS_WEIGHT = 40
EXPERIENCE_WEIGHT = 30
LANGUAGE_WEIGHT = 20
JOB_DESCRIPTION_WEIGHT = 10
JOB_DESCRIPTION_MIN_WORD_LENGTH = 4

# Candidate search
QUERY_MIN_TOKEN_LENGTH = 2
QUERY_MATCH_THRESHOLD = 50
SEARCH_DEFAULT_LIMIT = 50
SEARCH_MAX_LIMIT = 100
SEARCH_DEFAULT_SCORE = 50
SEARCH_EXPERIENCE_BONUS = 20
SEARCH_POSITION_BONUS = 15
SEARCH_LANGUAGE_DIVISOR = 5

import os

from dotenv import load_dotenv

load_dotenv()

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
LOG_FILE = os.getenv("LOG_FILE", os.path.join(BASE_DIR, "quiz.log"))

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
DEFAULT_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "15.0"))
API_BASE_URL = os.getenv("API_BASE_URL", f"http://{DEFAULT_HOST}:{DEFAULT_PORT}")

# 저장소 설정 ("memory" 또는 "mongo")
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "online_quiz")

# 세션 설정
SESSION_TTL = int(os.getenv("SESSION_TTL", "3600"))  # 1시간

# 시험 시간 설정
ENFORCE_TIME_LIMIT = os.getenv("ENFORCE_TIME_LIMIT", "true").lower() in ("1", "true", "yes")
SUBMIT_GRACE_SECONDS = int(os.getenv("SUBMIT_GRACE_SECONDS", "30"))  # 네트워크 지연 허용치

# 데모 데이터
SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "true").lower() in ("1", "true", "yes")

import os
from dotenv import load_dotenv

# Load a local .env file when running outside Docker
load_dotenv()

# 1. MONGODB CONFIGURATIONS
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "apple_music_db")

# 2. COLLECTION NAMES
COLLECTION_STREAMS = os.getenv("COLLECTION_STREAMS", "streams")
COLLECTION_SONGS = os.getenv("COLLECTION_SONGS", "songs")
COLLECTION_ARTISTS = os.getenv("COLLECTION_ARTISTS", "artists")
COLLECTION_USERS = os.getenv("COLLECTION_USERS", "users")

# 3. API SERVER
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "3000"))
CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# 4. QUERY LIMITS
MAX_LIMIT = int(os.getenv("MAX_LIMIT", "100"))              # Upper cap for ?limit=
MAX_WINDOW_DAYS = int(os.getenv("MAX_WINDOW_DAYS", "3650"))  # Upper cap for ?days= / ?period=

# 5. STARTUP RETRY
CONNECT_MAX_RETRIES = int(os.getenv("CONNECT_MAX_RETRIES", "5"))
CONNECT_RETRY_DELAY = float(os.getenv("CONNECT_RETRY_DELAY", "5"))

# 6. PATHS
MASTER_DATA_PATH = os.getenv("MASTER_DATA_PATH", "./data/master")

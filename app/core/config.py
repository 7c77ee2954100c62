import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pintukerja.db")

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# ✅ Frontend (upgrade links in paywall responses)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5000")

# ✅ CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5000,http://127.0.0.1:5000").split(",")
    if origin.strip()
]

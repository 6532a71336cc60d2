"""Environment configuration for the StashDog gateway."""

import os
from dotenv import load_dotenv

load_dotenv()

# Backend (Supabase project) location and credentials
STASHDOG_SUPABASE_URL = (
    os.getenv("STASHDOG_SUPABASE_URL") or os.getenv("STASHDOG_API_URL") or "http://localhost:54321"
)
STASHDOG_AUTH_TOKEN = os.getenv("STASHDOG_AUTH_TOKEN")
STASHDOG_SUPABASE_ANON_KEY = os.getenv("STASHDOG_SUPABASE_ANON_KEY")
STASHDOG_REQUEST_TIMEOUT_SEC = int(os.getenv("STASHDOG_REQUEST_TIMEOUT_SEC", "10"))

# Serving
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

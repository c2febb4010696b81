# config.py
# Values come from the environment (or a .env file next to this one).
import os
from dotenv import load_dotenv

load_dotenv()

# Flask secret key (for sessions)
FLASK_SECRET = os.environ.get("SESSION_SECRET", "CHANGE_THIS_TO_A_LONG_RANDOM_STRING")

# IoT shared secret key, sent by devices in the X-API-Key header
IOT_API_KEY = os.environ.get("API_KEY", "")

# PIN required to simulate issues from the debug panel
DEBUG_PIN = os.environ.get("DEBUG_PIN", "")

# OpenAI API key (not used for inference, image analysis is canned)
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")

# Database; empty means sqlite file in the instance folder
DATABASE_URI = os.environ.get("DATABASE_URI", "")

# Where uploaded plant images are written; empty means <instance>/uploads
UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "")

PORT = int(os.environ.get("PORT", 3000))

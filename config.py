# config.py
import os
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

TOKEN = os.getenv("DISCORD_TOKEN")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")

DATA_DIR = Path(os.getenv("GRINDBOT_DATA_DIR", "data"))

# timezone used for streak days and scheduled jobs
LOCAL_TZ = ZoneInfo(os.getenv("GRINDBOT_TIMEZONE", "Asia/Tokyo"))

REMINDER_HOUR = int(os.getenv("GRINDBOT_REMINDER_HOUR", "21"))
DIGEST_HOUR = int(os.getenv("GRINDBOT_DIGEST_HOUR", "22"))
DIGEST_CHANNEL = os.getenv("GRINDBOT_DIGEST_CHANNEL", "world-rank")

# realtime view: seconds between edits, and how long one view stays live
TICK_SECONDS = int(os.getenv("GRINDBOT_TICK_SECONDS", "5"))
TICK_LIFETIME = int(os.getenv("GRINDBOT_TICK_LIFETIME", "120"))

DEV_USER_IDS = [
    int(uid) for uid in os.getenv("DEV_USER_IDS", "").split(",") if uid.strip().isdigit()
]

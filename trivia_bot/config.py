# trivia_bot/config.py

import os
from dotenv import load_dotenv

# Load .env file if present (local development)
load_dotenv()

# "package.module:callable" returning a Transport bound to the messaging network
TRANSPORT_FACTORY = os.getenv("TRANSPORT_FACTORY")

DATA_DIR = os.getenv("DATA_DIR", "data")
QUESTIONS_PATH = os.getenv("QUESTIONS_PATH", os.path.join(DATA_DIR, "questions"))
MASTERKEYS_PATH = os.getenv("MASTERKEYS_PATH", os.path.join(DATA_DIR, "masterkeys"))
SCORES_PATH = os.getenv("SCORES_PATH", os.path.join(DATA_DIR, "scores"))
DHT_NODES_PATH = os.getenv("DHT_NODES_PATH", os.path.join(DATA_DIR, "DHTnodes"))

BOT_NAME = os.getenv("BOT_NAME", "triviabot")
STATUS_MESSAGE = os.getenv(
    "STATUS_MESSAGE",
    "Invite me to a group. !trivia starts a game of trivia, !help for other commands.",
)
SOURCE_URL = os.getenv("SOURCE_URL", "https://github.com/triviabot/triviabot")

LOG_DIR = os.getenv("LOG_DIR")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Used when the DHT nodes file can't be read
BOOTSTRAP_HOST = os.getenv("BOOTSTRAP_HOST", "144.76.60.215")
BOOTSTRAP_PORT = int(os.getenv("BOOTSTRAP_PORT", "33445"))
BOOTSTRAP_KEY = os.getenv(
    "BOOTSTRAP_KEY",
    "04119E835DF3E78BACF0F84235B300546AF8B936F035185E2A8E9E0A67C8924F",
)

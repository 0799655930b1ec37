"""Configuration for XML Combine"""

import os
from pathlib import Path

from dotenv import load_dotenv

# === Load .env ===
load_dotenv()

# Splitter back-end: "auto", "xml_split" or "lxml"
SPLITTER = os.getenv("XML_COMBINE_SPLITTER", "auto")
SPLITTERS = ("auto", "xml_split", "lxml")

# External XML::Twig splitter executable
XML_SPLIT_COMMAND = os.getenv("XML_COMBINE_XML_SPLIT", "xml_split")

# Encoding used to read fragments and write the combined file
ENCODING = os.getenv("XML_COMBINE_ENCODING", "utf-8")

# Log directory (console only when unset)
LOG_DIR = Path(os.environ["XML_COMBINE_LOG_DIR"]) if os.getenv("XML_COMBINE_LOG_DIR") else None
LOG_NAME = "xml_combine"

# Output naming
TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"  # ISO-8601 basic
COMBINED_MARKER = "combined"
RESERVED_EXTENSIONS = (".cmb",)

# Split fragments
HEADER_SUFFIX = "00"
FRAGMENT_DIGITS = 2  # xml_split default (-n 2)
XINCLUDE_NS = "http://www.w3.org/2001/XInclude"

# Archives
ARCHIVE_EXTENSION = ".zip"

# Telegram notifications (optional)
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
TELEGRAM_USER_IDS = os.getenv("TELEGRAM_USER_IDS", "")
TELEGRAM_TIMEOUT = 10

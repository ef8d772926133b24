"""
Configuration settings for StoryPulse.

Centralized configuration for extraction, statistics and pipeline parameters.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("STORYPULSE_DATA_ROOT", PROJECT_ROOT / "data"))
OUTPUT_ROOT = Path(os.getenv("STORYPULSE_OUTPUT_ROOT", PROJECT_ROOT / "output"))
OCR_INPUT_DIR = Path(os.getenv("STORYPULSE_OCR_DIR", DATA_ROOT / "ocr"))

# Username validation
USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 30
RESERVED_USERNAMES = (
    "instagram", "story", "stories", "post", "reply", "answer",
    "question", "poll", "vote", "tap", "click", "swipe",
)

# Answer validation
ANSWER_MIN_LENGTH = 1
ANSWER_MAX_LENGTH = 500
SYSTEM_UI_PHRASES = (
    "tap to reply", "swipe up", "see translation", "view replies",
    "нажмите", "проведите", "посмотреть", "ответить",
)

# Quality analysis
LOW_OCR_CONFIDENCE_THRESHOLD = 0.7
FEW_ANSWERS_THRESHOLD = 3
DUPLICATE_RATIO_THRESHOLD = 0.5
HIGH_QUALITY_SCORE = 0.8
MEDIUM_QUALITY_SCORE = 0.5

# Statistics
TOP_ANSWERS_LIMIT = 10
POSITIVE_WORDS = (
    "хорошо", "отлично", "супер", "класс",
    "amazing", "great", "good", "love", "awesome",
)
NEGATIVE_WORDS = (
    "плохо", "ужасно",
    "terrible", "bad", "hate", "awful", "horrible",
)

# Pipeline Configuration
CONTINUE_ON_STORY_FAILURE = True  # One bad story must not stop the batch

# Ingestion
USE_MOCK_DATA = os.getenv("STORYPULSE_MOCK", "false").lower() == "true"
MOCK_STORY_IDS = ("story_demo_1", "story_demo_2", "story_demo_3")
MOCK_ANSWERS_PER_STORY = 12
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp")

# Logging
LOG_LEVEL = os.getenv("STORYPULSE_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "storypulse.log"

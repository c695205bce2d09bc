# config.py
# App settings. Values under STORAGE / UI / LOGGING can be overridden with
# SYMPTOMCHECK_* environment variables.
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

APP = {
    "title": "SymptomCheck: Symptom Checker & Patient Records",
    "disclaimer": (
        "This tool is for informational purposes only and should not replace "
        "professional medical advice. Please consult with a healthcare provider "
        "for proper diagnosis and treatment."
    ),
    "emergency_notice": (
        "If you're experiencing severe symptoms like difficulty breathing, chest pain, "
        "or loss of consciousness, please seek immediate medical attention or call "
        "emergency services."
    ),
}

ENGINE = {
    "max_suggestions": 3,
    "migraine_severity_threshold": 7,
}

STORAGE = {
    "data_dir": Path(os.environ.get("SYMPTOMCHECK_DATA_DIR", BASE_DIR / "app_data")),
}

UI = {
    # artificial pause before showing results, in seconds
    "result_delay": float(os.environ.get("SYMPTOMCHECK_RESULT_DELAY", "2.0")),
    "rating_stars": 5,
}

LOGGING = {
    "level": os.environ.get("SYMPTOMCHECK_LOG_LEVEL", "INFO").upper(),
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

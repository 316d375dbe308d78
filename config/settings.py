"""ProfilePP Configuration Settings"""
from pathlib import Path
from dotenv import load_dotenv
import os

# Load environment variables - prioritize .env.local if it exists
env_local = Path('.env.local')
if env_local.exists():
    load_dotenv(env_local, override=True)
else:
    load_dotenv()

# Project Info
PROJECT_NAME = "ProfilePP"
VERSION = "1.0.0"

# Paths
BASE_DIR = Path(__file__).resolve().parent.parent
CACHE_DIR = Path(os.getenv("PROFILE_PP_CACHE_DIR", BASE_DIR / "cache"))

# osu! API (v1)
OSU_BASE_URL = os.getenv("OSU_BASE_URL", "https://osu.ppy.sh")
OSU_API_KEY = os.getenv("OSU_API_KEY")
OSU_API_TIMEOUT = int(os.getenv("OSU_API_TIMEOUT", 30))

# Rulesets by legacy id
RULESETS = {
    0: 'osu!',
    1: 'osu!taiko',
    2: 'osu!catch',
    3: 'osu!mania',
}

# Profile total configuration (aligned with ProfileTotalConfig)
PROFILE_CONFIG = {
    'decay': float(os.getenv("PP_DECAY", 0.95)),  # ProfileTotalConfig.DECAY
    'min_sample_for_fit': int(os.getenv("PP_MIN_SAMPLE_FOR_FIT", 100)),  # ProfileTotalConfig.MIN_SAMPLE_FOR_FIT
    'fit_iterations': int(os.getenv("PP_FIT_ITERATIONS", 1000)),  # ProfileTotalConfig.FIT_ITERATIONS
    'best_limit': int(os.getenv("PP_BEST_LIMIT", 100)),  # get_user_best page size (API max is 100)
}

# Evaluator used when --evaluator is not passed
DEFAULT_EVALUATOR = os.getenv("PP_EVALUATOR", "src.evaluators:ReportedPPEvaluator")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

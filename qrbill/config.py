"""
qrbill settings, read once from the environment at import.

A repo-root .env file is honoured for local work, but never under the test
stage so test runs do not depend on a developer's machine.
"""
import logging
import os

from qrbill.utils.env import get_env_bool, get_env_choice, get_env_str

logger = logging.getLogger(__name__)

BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

STAGES = {
    "prod": "production",
    "production": "production",
    "test": "test",
    "testing": "test",
}

if STAGES.get((os.getenv("QRBILL_STAGE") or "").strip().lower()) != "test":
    from dotenv import load_dotenv
    load_dotenv(dotenv_path=os.path.join(BASE_DIR, ".env"), override=False)

# --- Stage ---
APP_STAGE = STAGES.get((get_env_str("QRBILL_STAGE") or "").lower(), "dev")
IS_TEST = APP_STAGE == "test"
IS_PRODUCTION = APP_STAGE == "production"

# --- Fonts ---
# Liberation Sans is one of the fonts the QR-bill style guide allows. The font
# files are not shipped with the package; production refuses to fall back.
FONT_REGULAR_PATH = get_env_str(
    "QRBILL_FONT_REGULAR",
    default="/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
)
FONT_BOLD_PATH = get_env_str(
    "QRBILL_FONT_BOLD",
    default="/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
)
REQUIRE_FONTS = get_env_bool("QRBILL_REQUIRE_FONTS", default=IS_PRODUCTION)

# --- Rendering ---
DEFAULT_LANG = get_env_choice("QRBILL_DEFAULT_LANG", ("en", "de", "fr", "it"), "en")
QR_ERROR_LEVEL = get_env_choice("QRBILL_QR_ERROR_LEVEL", ("L", "M", "Q", "H"), "M")

# --- Logging ---
LOG_LEVEL = get_env_choice("QRBILL_LOG_LEVEL", ("DEBUG", "INFO", "WARNING", "ERROR"), "INFO")
LOG_JSON = get_env_bool("QRBILL_LOG_JSON", default=False)

if REQUIRE_FONTS and not all(os.path.exists(p) for p in (FONT_REGULAR_PATH, FONT_BOLD_PATH)):
    logger.warning(f"[Config] QR-bill fonts missing ({FONT_REGULAR_PATH}, {FONT_BOLD_PATH}); rendering will fail")

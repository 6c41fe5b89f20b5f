# poketools/config.py
import os

_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

DEFAULT_DB_PATH = os.path.join(_PROJECT_ROOT, "poketools.db")
DB_URL = os.environ.get("POKETOOLS_DB_URL", f"sqlite:///{DEFAULT_DB_PATH}")

POKEAPI_BASE_URL = os.environ.get("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2").rstrip("/")
HTTP_TIMEOUT = float(os.environ.get("POKETOOLS_HTTP_TIMEOUT", "15"))

# vacío = cache solo en memoria
CACHE_DIR = os.environ.get("POKETOOLS_CACHE_DIR", "")

STATE_PATH = os.environ.get("POKETOOLS_STATE_PATH", os.path.join(_PROJECT_ROOT, "data", "poketools-data.json"))

DEFAULT_GENERATION = int(os.environ.get("POKETOOLS_DEFAULT_GENERATION", "8"))
MIN_GENERATION = 1
MAX_GENERATION = 9

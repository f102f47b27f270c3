"""did-i-fumble: Judge a chat screenshot with a vision model and return a safe verdict."""

from did_i_fumble.core import analyze
from did_i_fumble.normalization import normalize_result
from did_i_fumble.parsing import extract_json
from did_i_fumble.schema import ALLOWED_OUTCOMES, FALLBACK_VERDICT, Verdict

__version__ = "0.1.0"

__all__ = [
    "analyze",
    "extract_json",
    "normalize_result",
    "ALLOWED_OUTCOMES",
    "FALLBACK_VERDICT",
    "Verdict",
    "__version__",
]

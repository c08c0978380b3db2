"""
Fallback Adapter: NodeSeq -> SymPy text, and the sub-process runner that
applies the difference and simplify strategies under a timeout.
"""

from .engine import DIFFERENCE, SIMPLIFY, STRATEGIES, SympyEngine
from .ipc import EngineReply
from .runner import NO_RESULT, TIMEOUT, FallbackRunner, default_start_method
from .translate import FUNCTIONS, EngineTranslator, translate

__all__ = [
	"DIFFERENCE", "SIMPLIFY", "STRATEGIES", "SympyEngine",
	"EngineReply",
	"NO_RESULT", "TIMEOUT", "FallbackRunner", "default_start_method",
	"FUNCTIONS", "EngineTranslator", "translate",
]

from .engine import MAX_DEPTH, MAX_ITERATIONS, RewriteEngine, RewriteOutcome, RewriteStep, canonicalize

__all__ = ["MAX_DEPTH", "MAX_ITERATIONS", "RewriteEngine", "RewriteOutcome", "RewriteStep", "canonicalize"]

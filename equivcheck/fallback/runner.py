"""
Fallback runner: executes one engine strategy in an isolated child process
under a wall-clock timeout and a CPU-time cap.

A timed-out child is killed and abandoned; nothing it computed is read
back, so an interrupted simplify leaves no state behind in the caller.
"""

from __future__ import annotations
import logging
import math
import multiprocessing as mp
import queue
import resource
from typing import Optional

from equivcheck.fallback.engine import SympyEngine
from equivcheck.fallback.ipc import EngineReply

logger = logging.getLogger(__name__)

TIMEOUT = "timeout"
NO_RESULT = "no_result"

# imported once by the fork server so each child starts with SymPy loaded
FORKSERVER_PRELOAD = ["equivcheck.fallback.runner"]


def default_start_method() -> str:
	"""
	forkserver where the platform has it, spawn elsewhere. Children are never
	forked from the caller, which may be running checks on several threads.
	"""
	if "forkserver" in mp.get_all_start_methods():
		return "forkserver"
	return "spawn"


class FallbackRunner:
	"""Coordinator for fallback strategy runs in child processes."""

	def __init__(self, start_method: Optional[str] = None) -> None:
		self.start_method = start_method or default_start_method()

	@staticmethod
	def apply_cpu_limit(cpu_seconds: Optional[int]) -> None:
		"""Apply a CPU soft limit not exceeding the current hard limit."""
		if not isinstance(cpu_seconds, int) or cpu_seconds <= 0:
			return
		soft_req = int(cpu_seconds)
		soft_cur, hard_cur = resource.getrlimit(resource.RLIMIT_CPU)
		if hard_cur == resource.RLIM_INFINITY:
			soft_new = soft_req
		else:
			if soft_req < hard_cur:
				soft_new = soft_req
			else:
				soft_new = hard_cur
		resource.setrlimit(resource.RLIMIT_CPU, (soft_new, hard_cur))

	@staticmethod
	def child_run(strategy: str, left: str, right: str, cpu_seconds: Optional[int], q: mp.Queue) -> None:
		"""Run the strategy in the child process, always reporting a reply."""
		try:
			FallbackRunner.apply_cpu_limit(cpu_seconds)
		except (OSError, ValueError) as e:
			q.put(EngineReply(False, f"limit_error:{e}"))
			return
		q.put(SympyEngine.run(strategy, left, right))

	def run(self, strategy: str, left: str, right: str, timeout_s: float) -> EngineReply:
		"""
		Run `strategy` on two translated expressions. Returns the child's reply,
		or a failed reply with message "timeout" (child still running at the
		deadline) or "no_result" (child exited without replying).
		"""
		timeout_s = max(0.0, float(timeout_s))
		cpu_seconds = int(math.ceil(timeout_s)) + 1
		ctx = mp.get_context(self.start_method)
		if self.start_method == "forkserver":
			ctx.set_forkserver_preload(FORKSERVER_PRELOAD)
		q = ctx.Queue()
		p = ctx.Process(
			target=FallbackRunner.child_run,
			args=(strategy, left, right, cpu_seconds, q),
		)
		p.daemon = True
		p.start()
		res = None
		try:
			res = q.get(timeout=timeout_s)
		except queue.Empty:
			res = None
		alive = p.is_alive()
		if alive:
			p.kill()
		p.join(0.2)
		q.close()
		if res is None:
			if alive:
				logger.debug("Fallback %s timed out after %.3fs", strategy, timeout_s)
				return EngineReply(False, TIMEOUT)
			else:
				return EngineReply(False, NO_RESULT)
		return res

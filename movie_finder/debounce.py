"""
Debounce helper for the asyncio event loop.
Collapses a burst of pushed values into one callback fired after a quiet period.
"""

import asyncio  # event loop timers
from typing import Any, Callable, Optional  # type hints


class Debouncer:
	"""
	Calls `callback(value)` once the input has been quiet for `delay_ms`.
	Every push restarts the timer; there is no maximum wait.
	The callback may be a plain function or a coroutine function.
	"""

	def __init__(self, delay_ms: int, callback: Callable[[Any], Any]):
		self.delay_s = delay_ms / 1000.0  # asyncio works in seconds
		self.callback = callback  # fired with the last pushed value
		self._handle: Optional[asyncio.TimerHandle] = None  # pending timer, if any
		self._value: Any = None  # last pushed value
		self._task: Optional[asyncio.Future] = None  # task for coroutine callbacks

	@property
	def pending(self) -> bool:
		return self._handle is not None

	def push(self, value: Any) -> None:
		"""Remember `value` and restart the quiet-period timer. Must run inside the loop."""
		self.cancel()  # reset on every push
		self._value = value
		self._handle = asyncio.get_running_loop().call_later(self.delay_s, self._fire)

	def cancel(self) -> None:
		"""Drop the pending firing, if any."""
		if self._handle is not None:
			self._handle.cancel()
			self._handle = None

	def flush(self) -> None:
		"""Fire the pending value now instead of waiting."""
		if self._handle is not None:
			self.cancel()
			self._fire()

	def _fire(self) -> None:
		self._handle = None
		result = self.callback(self._value)
		if asyncio.iscoroutine(result):
			self._task = asyncio.ensure_future(result)

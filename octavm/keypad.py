"""Thread-safe 16-key keypad shared between the input thread and the machine."""

import threading
import time
from typing import Optional

from octavm.constants import NUM_KEYS


class Keypad:
    """Boolean key table guarded by a single lock.

    The input producer calls :meth:`press` and :meth:`release`; the machine
    reads keys through :meth:`state` or :meth:`consume` and blocks in
    :meth:`wait_for_press` while executing FX0A.
    """

    def __init__(self):
        self._keys = [False] * NUM_KEYS
        self._condition = threading.Condition(threading.Lock())
        self._presses = 0
        self._last_key: Optional[int] = None

    @staticmethod
    def _validate(key: int) -> int:
        key = int(key)
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in range 0x0-0xF, got {key:#x}")
        return key

    def press(self, key: int) -> None:
        key = self._validate(key)
        with self._condition:
            self._keys[key] = True
            self._presses += 1
            self._last_key = key
            self._condition.notify_all()

    def release(self, key: int) -> None:
        key = self._validate(key)
        with self._condition:
            self._keys[key] = False

    def state(self, key: int) -> bool:
        """Level read: whether the key is currently held."""
        key = int(key)
        with self._condition:
            return 0 <= key < NUM_KEYS and self._keys[key]

    def consume(self, key: int) -> bool:
        """Read a key and release it if pressed, so a press is seen once."""
        key = int(key)
        with self._condition:
            if not 0 <= key < NUM_KEYS or not self._keys[key]:
                return False
            self._keys[key] = False
            return True

    def clear(self) -> None:
        """Release every key."""
        with self._condition:
            self._keys = [False] * NUM_KEYS

    def pressed_keys(self) -> list[int]:
        with self._condition:
            return [key for key, down in enumerate(self._keys) if down]

    @property
    def last_key(self) -> Optional[int]:
        with self._condition:
            return self._last_key

    def press_count(self) -> int:
        """Number of presses seen since construction; never decreases."""
        with self._condition:
            return self._presses

    def wait_for_press(self, since: int, timeout: Optional[float] = None) -> Optional[int]:
        """Block until a press newer than `since` arrives.

        Args:
            since: Value of :meth:`press_count` when waiting began
            timeout: Maximum seconds to wait, or None to wait forever

        Returns:
            The most recently pressed key, or None if the timeout elapsed
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._condition:
            while self._presses <= since:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return None
                self._condition.wait(remaining)
            return self._last_key

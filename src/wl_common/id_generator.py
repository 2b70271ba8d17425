"""Snowflake-style ID generator for user, wallet and transaction ids.

IDs are zero-padded decimal strings of fixed width, so lexical key order in
the store matches creation order. That keeps `transaction_<walletId>_<id>`
prefix scans chronological. IDs never contain "_", which the key layout and
the bearer token format both use as a separator.
"""

import threading
import time


class SnowflakeIdGenerator:
    """Simple snowflake ID generator.

    Layout (63 bits used):
      - 41 bits: millisecond timestamp (since custom epoch)
      - 10 bits: machine_id (0-1023)
      - 12 bits: sequence (0-4095 per millisecond)
    """

    _EPOCH_MS = 1_700_000_000_000  # 2023-11-14 approx
    _MACHINE_BITS = 10
    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1
    _WIDTH = 19  # digits in 2**63 - 1

    def __init__(self, machine_id: int = 0) -> None:
        if not (0 <= machine_id < (1 << self._MACHINE_BITS)):
            raise ValueError(f"machine_id must be 0-{(1 << self._MACHINE_BITS) - 1}")
        self._machine_id = machine_id
        self._sequence = 0
        self._last_timestamp_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            ts = self._current_ms()
            if ts == self._last_timestamp_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    ts = self._wait_next_ms(ts)
            else:
                self._sequence = 0

            self._last_timestamp_ms = ts
            id_int = (
                ((ts - self._EPOCH_MS) << (self._MACHINE_BITS + self._SEQUENCE_BITS))
                | (self._machine_id << self._SEQUENCE_BITS)
                | self._sequence
            )
            return str(id_int).zfill(self._WIDTH)

    def _current_ms(self) -> int:
        return int(time.time() * 1000)

    def _wait_next_ms(self, last_ts: int) -> int:
        ts = self._current_ms()
        while ts <= last_ts:
            ts = self._current_ms()
        return ts


_default_generator = SnowflakeIdGenerator()


def generate_id() -> str:
    """Generate a unique, lexically ordered string ID from the module-level generator."""
    return _default_generator.next_id()

"""Unit tests for KeyedLocks."""

import threading

import pytest

from storefront.domain.exceptions import ResourceBusy
from storefront.domain.service.locks import KeyedLocks


class TestKeyedLocks:

    def test_times_out_when_held(self):
        locks = KeyedLocks("order", timeout=0.05)
        holding = threading.Event()
        release = threading.Event()

        def holder():
            with locks.hold("o1"):
                holding.set()
                release.wait(2)

        t = threading.Thread(target=holder)
        t.start()
        holding.wait(2)
        try:
            with pytest.raises(ResourceBusy, match="order 'o1'"):
                with locks.hold("o1"):
                    pass
        finally:
            release.set()
            t.join()

    def test_different_keys_do_not_contend(self):
        locks = KeyedLocks("order", timeout=0.05)
        with locks.hold("o1"):
            with locks.hold("o2"):
                pass

    def test_released_after_exception(self):
        locks = KeyedLocks("order", timeout=0.05)
        with pytest.raises(RuntimeError):
            with locks.hold("o1"):
                raise RuntimeError("boom")
        with locks.hold("o1"):
            pass

from assistant.storage import MemoryStore, StoreError
from assistant.usage import BADGE_KEY, QUESTIONS_KEY, UsageCounter
from conftest import BrokenStore


def test_counter_starts_at_zero_and_increments():
    counter = UsageCounter(MemoryStore())
    assert counter.read() == 0
    assert [counter.increment() for _ in range(3)] == [1, 2, 3]
    assert counter.read() == 3


def test_counter_is_persisted_in_the_store():
    store = MemoryStore()
    UsageCounter(store).increment()
    assert store.read(QUESTIONS_KEY) == b"1"
    assert UsageCounter(store).increment() == 2


def test_garbage_counter_value_reads_as_zero():
    store = MemoryStore()
    store.write(QUESTIONS_KEY, b"abc")
    assert UsageCounter(store).read() == 0


def test_badge_is_claimed_once_at_threshold():
    counter = UsageCounter(MemoryStore())
    claims = []
    for _ in range(5):
        count = counter.increment()
        claims.append(counter.claim_badge(3, count=count))
    assert claims == [False, False, True, False, False]
    assert counter.badge_shown()


def test_badge_flag_survives_a_new_counter():
    store = MemoryStore()
    store.write(BADGE_KEY, b"true")
    store.write(QUESTIONS_KEY, b"10")
    assert UsageCounter(store).claim_badge(3) is False


def test_broken_store_degrades_gracefully():
    counter = UsageCounter(BrokenStore())
    assert counter.read() == 0
    assert counter.increment() == 1
    assert counter.badge_shown() is False


class BadgeWriteFails(MemoryStore):
    def write(self, key, value):
        if key == BADGE_KEY:
            raise StoreError("flag not persisted")
        super().write(key, value)


def test_badge_fires_once_even_if_flag_cannot_be_persisted():
    counter = UsageCounter(BadgeWriteFails())
    claims = [counter.claim_badge(3, count=n) for n in range(1, 7)]
    assert claims.count(True) == 1
    assert claims[2] is True
    assert counter.badge_shown()


def test_badge_fires_once_on_a_fully_broken_store():
    counter = UsageCounter(BrokenStore())
    assert [counter.claim_badge(3, count=n) for n in (3, 4, 5)] == [True, False, False]

from __future__ import annotations

from tastify.services.share_inbox import SharedUrlMailbox


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


URL = "https://www.tiktok.com/@chef/video/123"


class TestSharedUrlMailbox:
    def test_consume_is_exactly_once(self) -> None:
        mailbox = SharedUrlMailbox(clock=FakeClock())
        mailbox.deposit("user-1", URL)

        first = mailbox.consume("user-1")

        assert first is not None
        assert first.url == URL
        assert mailbox.consume("user-1") is None

    def test_stale_entry_is_dropped(self) -> None:
        clock = FakeClock()
        mailbox = SharedUrlMailbox(max_age_seconds=300, clock=clock)
        mailbox.deposit("user-1", URL)

        clock.now += 300

        assert mailbox.consume("user-1") is None
        assert mailbox.consume("user-1") is None

    def test_fresh_entry_just_under_window(self) -> None:
        clock = FakeClock()
        mailbox = SharedUrlMailbox(max_age_seconds=300, clock=clock)
        mailbox.deposit("user-1", URL)

        clock.now += 299

        assert mailbox.consume("user-1") is not None

    def test_deposit_overwrites_single_slot(self) -> None:
        mailbox = SharedUrlMailbox(clock=FakeClock())
        mailbox.deposit("user-1", URL)
        mailbox.deposit("user-1", "https://www.instagram.com/reel/abc/")

        entry = mailbox.consume("user-1")

        assert entry is not None
        assert entry.url == "https://www.instagram.com/reel/abc/"
        assert mailbox.consume("user-1") is None

    def test_slots_are_per_user(self) -> None:
        mailbox = SharedUrlMailbox(clock=FakeClock())
        mailbox.deposit("user-1", URL)

        assert mailbox.consume("user-2") is None
        assert mailbox.consume("user-1") is not None

    def test_clear(self) -> None:
        mailbox = SharedUrlMailbox(clock=FakeClock())
        mailbox.deposit("user-1", URL)
        mailbox.clear("user-1")

        assert mailbox.consume("user-1") is None

    def test_deposit_evicts_abandoned_slots(self) -> None:
        clock = FakeClock()
        mailbox = SharedUrlMailbox(max_age_seconds=300, clock=clock)
        mailbox.deposit("user-1", URL)
        mailbox.deposit("user-2", URL)

        clock.now += 300
        mailbox.deposit("user-3", URL)

        assert len(mailbox) == 1
        assert mailbox.consume("user-3") is not None

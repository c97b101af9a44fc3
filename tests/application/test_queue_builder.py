"""Tests for daily queue building, day reset and session extension."""

import random
from collections import Counter
from datetime import timedelta

from vocabdeck.application.queue_builder import (
    build_queue,
    check_day_reset,
    extend_session,
    remaining_allowance,
    select_candidates,
)
from vocabdeck.domain.models import Deck, LearningMode, SessionStatus


class TestCheckDayReset:
    def test_new_day_resets_counters(self, deck_factory, today):
        deck = deck_factory(last_session_date=today - timedelta(days=1))
        deck.cards_reviewed_today = 5
        deck.session_extension = 3

        check_day_reset(deck, today)

        assert deck.last_session_date == today
        assert deck.cards_reviewed_today == 0
        assert deck.session_extension == 0

    def test_same_day_is_idempotent(self, deck_factory, today):
        deck = deck_factory(last_session_date=today)
        deck.cards_reviewed_today = 4
        deck.session_extension = 2

        check_day_reset(deck, today)
        check_day_reset(deck, today)

        assert deck.cards_reviewed_today == 4
        assert deck.session_extension == 2

    def test_never_used_deck(self, deck_factory, today):
        deck = deck_factory(last_session_date=None)
        check_day_reset(deck, today)
        assert deck.last_session_date == today


class TestSelectCandidates:
    def test_spaced_takes_new_and_due(self, deck_factory, today):
        deck = deck_factory(n=4, mode=LearningMode.SPACED)
        deck.cards[1].due_date = today
        deck.cards[2].due_date = today - timedelta(days=3)
        deck.cards[3].due_date = today + timedelta(days=1)

        selected = select_candidates(deck, today)

        assert selected == deck.cards[:3]

    def test_spaced_ignores_finished_status(self, deck_factory, today):
        deck = deck_factory(n=2, mode=LearningMode.SPACED, status=SessionStatus.FINISHED)
        assert len(select_candidates(deck, today)) == 2

    def test_simple_skips_finished_only(self, deck_factory, today):
        deck = deck_factory(n=3)
        deck.cards[0].session_status = SessionStatus.FINISHED
        deck.cards[1].session_status = SessionStatus.SPACED
        deck.cards[1].due_date = today + timedelta(days=10)

        selected = select_candidates(deck, today)

        # SPACED cards from an earlier mode are eligible regardless of due date
        assert selected == deck.cards[1:]


class TestBuildQueue:
    def test_caps_at_daily_limit(self, deck_factory, today, rng):
        deck = deck_factory(n=3, daily_limit=2)

        result = build_queue(deck, today, rng)

        assert len(result.queue) == 2
        assert result.candidates == 3
        assert result.remaining == 2
        assert all(card in deck.cards for card in result.queue)

    def test_queue_entries_alias_deck_cards(self, deck_factory, today, rng):
        deck = deck_factory(n=3)
        result = build_queue(deck, today, rng)
        for entry in result.queue:
            assert any(entry is card for card in deck.cards)

    def test_respects_reviews_done_and_extension(self, deck_factory, today, rng):
        deck = deck_factory(n=10, daily_limit=5)
        deck.cards_reviewed_today = 4
        deck.session_extension = 2

        result = build_queue(deck, today, rng)

        assert len(result.queue) == 3

    def test_zero_remaining_gives_empty_queue(self, deck_factory, today, rng):
        deck = deck_factory(n=3, daily_limit=2)
        deck.cards_reviewed_today = 7

        assert remaining_allowance(deck) == 0
        assert build_queue(deck, today, rng).queue == []

    def test_empty_deck(self, today, rng):
        deck = Deck(name="Empty")
        result = build_queue(deck, today, rng)
        assert result.queue == []
        assert result.candidates == 0

    def test_day_reset_happens_before_selection(self, deck_factory, today, rng):
        deck = deck_factory(n=5, daily_limit=5, last_session_date=today - timedelta(days=1))
        deck.cards_reviewed_today = 5
        deck.session_extension = 3

        result = build_queue(deck, today, rng)

        assert deck.cards_reviewed_today == 0
        assert deck.session_extension == 0
        assert len(result.queue) == 5

    def test_spaced_queue_only_due_cards(self, deck_factory, today, rng):
        deck = deck_factory(n=20, mode=LearningMode.SPACED, daily_limit=50)
        for i, card in enumerate(deck.cards):
            card.due_date = today + timedelta(days=(i % 5) - 2)

        result = build_queue(deck, today, rng)

        assert result.queue
        assert all(c.due_date is None or c.due_date <= today for c in result.queue)

    def test_simple_queue_never_has_finished(self, deck_factory, today, rng):
        deck = deck_factory(n=20, daily_limit=50)
        for card in deck.cards[::2]:
            card.session_status = SessionStatus.FINISHED

        result = build_queue(deck, today, rng)

        assert len(result.queue) == 10
        assert all(c.session_status != SessionStatus.FINISHED for c in result.queue)

    def test_length_bound_over_many_configurations(self, deck_factory, today):
        gen = random.Random(7)
        for _ in range(200):
            deck = deck_factory(n=gen.randint(0, 12), daily_limit=gen.randint(1, 8))
            deck.session_extension = gen.randint(0, 4)
            deck.cards_reviewed_today = gen.randint(0, 15)
            bound = max(0, deck.daily_limit + deck.session_extension - deck.cards_reviewed_today)

            result = build_queue(deck, today, gen)

            assert len(result.queue) <= bound

    def test_shuffle_is_uniform(self, deck_factory, today):
        deck = deck_factory(n=4, daily_limit=4)
        gen = random.Random(42)
        trials = 8000
        positions = {card.id: Counter() for card in deck.cards}

        for _ in range(trials):
            for pos, card in enumerate(build_queue(deck, today, gen).queue):
                positions[card.id][pos] += 1

        expected = trials / 4
        for counter in positions.values():
            for pos in range(4):
                assert abs(counter[pos] - expected) < expected * 0.1

    def test_does_not_reorder_deck(self, deck_factory, today, rng):
        deck = deck_factory(n=6, daily_limit=6)
        original = list(deck.cards)
        build_queue(deck, today, rng)
        assert deck.cards == original


class TestExtendSession:
    def test_extension_adds_to_queue(self, deck_factory, today, rng):
        deck = deck_factory(n=10, daily_limit=2)
        deck.cards_reviewed_today = 2

        result = extend_session(deck, 3, today, rng)

        assert deck.session_extension == 3
        assert deck.daily_limit == 2
        assert len(result.queue) == 3

    def test_amount_floored_to_one(self, deck_factory, today, rng):
        deck = deck_factory(n=10, daily_limit=2)
        extend_session(deck, 0, today, rng)
        extend_session(deck, -5, today, rng)
        assert deck.session_extension == 2

    def test_extensions_accumulate_within_day(self, deck_factory, today, rng):
        deck = deck_factory(n=10, daily_limit=2)
        extend_session(deck, 2, today, rng)
        result = extend_session(deck, 3, today, rng)
        assert deck.session_extension == 5
        assert len(result.queue) == 7

    def test_extension_cleared_next_day(self, deck_factory, today, rng):
        deck = deck_factory(n=10, daily_limit=2)
        extend_session(deck, 4, today, rng)

        result = build_queue(deck, today + timedelta(days=1), rng)

        assert deck.session_extension == 0
        assert len(result.queue) == 2

    def test_extension_on_stale_deck_survives_rebuild(self, deck_factory, today, rng):
        deck = deck_factory(n=10, daily_limit=2, last_session_date=today - timedelta(days=2))
        deck.session_extension = 9

        result = extend_session(deck, 3, today, rng)

        assert deck.session_extension == 3
        assert len(result.queue) == 5

"""Tests for session reducers and the RankingEngine."""

import pytest

from songrank.core.errors import DuplicateSongError, InvalidVoteError
from songrank.models import Song
from songrank.ranking import RankCentrality, UnorderedPair
from songrank.session import (
    RankingEngine,
    apply_reorder,
    apply_swap,
    apply_toggle_lock,
    apply_vote,
    displayed_ranking,
    new_session,
)


def songs(*ids: str) -> list[Song]:
    return [Song(id=i, name=f"Song {i}") for i in ids]


def ids_of(engine: RankingEngine) -> list[str]:
    return [item.song.id for item in engine.ranking_list()]


def vote_all(engine: RankingEngine, winner_first: list[str]) -> None:
    """Vote every remaining pair according to a fixed preference order."""
    preference = {song_id: i for i, song_id in enumerate(winner_first)}
    while (pair := engine.current_pair()) is not None:
        a, b = pair
        if preference[a.id] < preference[b.id]:
            engine.record_vote(a.id, b.id)
        else:
            engine.record_vote(b.id, a.id)


class TestNewSession:
    """Tests for session creation."""

    def test_fresh_state(self):
        """Test a new session starts with empty history and overrides."""
        state = new_session(songs("A", "B", "C"))
        assert len(state.pairs) == 3
        assert len(state.log) == 0
        assert state.played == frozenset()
        assert len(state.locks) == 0
        assert state.manual_order is None

    def test_duplicate_ids_rejected(self):
        """Test duplicate song ids are refused."""
        with pytest.raises(DuplicateSongError):
            new_session(songs("A", "B", "A"))


class TestApplyVote:
    """Tests for the vote reducer."""

    def test_vote_appends_and_marks_played(self):
        """Test a vote lands in the log and the played set."""
        state = apply_vote(new_session(songs("A", "B")), "B", "A")
        assert len(state.log) == 1
        assert state.log[0].winner_id == "B"
        assert state.log[0].sequence_index == 0
        assert UnorderedPair.of("A", "B") in state.played

    def test_vote_returns_new_state(self):
        """Test the previous state is untouched."""
        before = new_session(songs("A", "B"))
        apply_vote(before, "A", "B")
        assert len(before.log) == 0

    def test_self_vote_rejected(self):
        """Test a song cannot beat itself."""
        with pytest.raises(InvalidVoteError, match="itself"):
            apply_vote(new_session(songs("A", "B")), "A", "A")

    def test_unknown_id_rejected(self):
        """Test votes naming unknown songs are refused."""
        state = new_session(songs("A", "B"))
        with pytest.raises(InvalidVoteError, match="unknown") as exc_info:
            apply_vote(state, "A", "Z")
        assert exc_info.value.loser_id == "Z"

    def test_repeat_vote_keeps_played_set(self):
        """Test re-voting a pair grows the log but not the played set."""
        state = new_session(songs("A", "B", "C"))
        state = apply_vote(state, "A", "B")
        state = apply_vote(state, "B", "A")
        assert len(state.log) == 2
        assert len(state.played) == 1


class TestCommandReducers:
    """Tests for lock, reorder and swap reducers."""

    def test_toggle_lock_round_trip(self):
        """Test locking then unlocking leaves no lock behind."""
        scorer = RankCentrality()
        state = new_session(songs("A", "B", "C"))
        locked = apply_toggle_lock(state, "B", scorer)
        assert locked.locks.get("B") == 1
        unlocked = apply_toggle_lock(locked, "B", scorer)
        assert "B" not in unlocked.locks

    def test_reorder_materializes_manual_order(self):
        """Test the first reorder creates a manual order from the display."""
        scorer = RankCentrality()
        state = apply_reorder(new_session(songs("A", "B", "C")), 2, 0, scorer)
        assert state.manual_order == ("C", "A", "B")
        assert [r.song.id for r in displayed_ranking(state, scorer)] == ["C", "A", "B"]

    def test_swap_reducer(self):
        """Test swap exchanges displayed positions."""
        scorer = RankCentrality()
        state = apply_swap(new_session(songs("A", "B", "C")), 0, 2, scorer)
        assert [r.song.id for r in displayed_ranking(state, scorer)] == ["C", "B", "A"]


class TestRankingEngine:
    """Tests for the RankingEngine controller."""

    def test_two_song_scenario(self):
        """Test one vote completes a two-song ranking."""
        engine = RankingEngine(songs("A", "B"), seed=1)
        assert engine.progress().fraction == 0.0
        assert engine.current_pair() is not None

        engine.record_vote("A", "B")

        assert engine.progress().fraction == 1.0
        assert engine.current_pair() is None
        assert engine.is_complete
        scores = engine.scores()
        assert scores["A"] > scores["B"]
        assert ids_of(engine) == ["A", "B"]

    def test_three_song_scenario(self):
        """Test an undefeated song ranks first and a winless one last."""
        engine = RankingEngine(songs("A", "B", "C"), seed=1)
        engine.record_vote("A", "B")
        engine.record_vote("B", "C")
        engine.record_vote("A", "C")

        assert engine.progress().fraction == 1.0
        assert engine.current_pair() is None
        ranking = ids_of(engine)
        assert ranking[0] == "A"
        assert ranking[-1] == "C"

    def test_current_pair_catalog_order(self):
        """Test the pair is returned in catalog order."""
        engine = RankingEngine(songs("C", "A"), seed=0)
        a, b = engine.current_pair()
        assert (a.id, b.id) == ("C", "A")

    def test_exhausting_all_pairs(self, five_songs):
        """Test voting every pair once ends the session."""
        engine = RankingEngine(five_songs, seed=3)
        vote_all(engine, ["E", "D", "C", "B", "A"])

        progress = engine.progress()
        assert progress.completed == progress.total == 10
        assert progress.fraction == 1.0
        assert engine.current_pair() is None
        assert ids_of(engine)[-1] == "A"
        assert sorted(ids_of(engine)) == ["A", "B", "C", "D", "E"]

    def test_ranking_has_every_song_once(self, five_songs):
        """Test the displayed ranking covers each song exactly once."""
        engine = RankingEngine(five_songs, seed=5)
        engine.record_vote("C", "A")
        engine.toggle_lock(engine.ranking_list()[3].song.id)
        engine.reorder(0, 4)
        engine.record_vote("B", "D")
        ranking = ids_of(engine)
        assert len(ranking) == 5
        assert sorted(ranking) == ["A", "B", "C", "D", "E"]

    def test_no_votes_uniform_scores(self):
        """Test scores are 1/n before any vote."""
        engine = RankingEngine(songs("A", "B", "C", "D"))
        for score in engine.scores().values():
            assert score == pytest.approx(0.25, abs=1e-9)

    def test_invalid_vote_leaves_state(self):
        """Test a rejected vote changes nothing."""
        engine = RankingEngine(songs("A", "B"))
        with pytest.raises(InvalidVoteError):
            engine.record_vote("A", "A")
        assert len(engine.matchups) == 0
        assert engine.progress().completed == 0

    def test_lock_survives_votes(self):
        """Test a locked song keeps its slot while scores change."""
        engine = RankingEngine(songs("A", "B", "C", "D"), seed=2)
        locked_id = engine.ranking_list()[2].song.id
        engine.toggle_lock(locked_id)
        assert engine.is_locked(locked_id)

        others = [s.id for s in engine.songs if s.id != locked_id]
        for winner in others:
            if winner != others[0]:
                engine.record_vote(winner, locked_id)
        engine.record_vote(locked_id, others[0])

        assert ids_of(engine)[2] == locked_id

        engine.toggle_lock(locked_id)
        assert not engine.is_locked(locked_id)

    def test_swap_refused_for_locked(self):
        """Test swap is a no-op when one end is locked."""
        engine = RankingEngine(songs("A", "B", "C"))
        engine.toggle_lock("B")
        before = ids_of(engine)
        assert not engine.can_swap(0, 1)
        engine.swap(0, 1)
        assert ids_of(engine) == before

    def test_swap_exchanges_positions(self):
        """Test swap trades two unlocked songs exactly."""
        engine = RankingEngine(songs("A", "B", "C", "D"))
        engine.toggle_lock("B")
        engine.swap(0, 3)
        assert ids_of(engine) == ["D", "B", "C", "A"]

    def test_can_reorder_policy(self):
        """Test drags from or onto locked songs are refused."""
        engine = RankingEngine(songs("A", "B", "C"))
        engine.toggle_lock("C")
        assert engine.can_reorder(0, 1)
        assert not engine.can_reorder(0, 2)
        assert not engine.can_reorder(2, 0)
        assert not engine.can_reorder(0, 0)
        assert not engine.can_reorder(0, 9)

    def test_reorder_out_of_range_noop(self):
        """Test invalid reorder indices change nothing."""
        engine = RankingEngine(songs("A", "B"))
        engine.reorder(0, 7)
        assert engine.state.manual_order is None
        assert ids_of(engine) == ["A", "B"]

    def test_manual_order_persists_across_votes(self):
        """Test a reorder sticks even when votes disagree."""
        engine = RankingEngine(songs("A", "B", "C"))
        engine.reorder(2, 0)
        engine.record_vote("A", "C")
        assert ids_of(engine) == ["C", "A", "B"]

    def test_unlock_returns_song_to_computed_place(self):
        """Test unlocking drops the song from the manual order."""
        engine = RankingEngine(songs("A", "B", "C"))
        engine.record_vote("A", "B")
        engine.record_vote("A", "C")
        engine.record_vote("B", "C")
        engine.reorder(0, 2)  # B, C, A
        engine.toggle_lock("A")
        engine.toggle_lock("A")
        assert engine.state.manual_order == ("B", "C")
        assert ids_of(engine) == ["B", "C", "A"]

    def test_replace_items_resets(self):
        """Test a new item set discards votes, locks and manual order."""
        engine = RankingEngine(songs("A", "B", "C"))
        engine.record_vote("A", "B")
        engine.toggle_lock("C")
        engine.reorder(0, 1)

        engine.replace_items(songs("X", "Y"))

        assert len(engine.matchups) == 0
        assert not engine.is_locked("C")
        assert engine.state.manual_order is None
        assert engine.progress().total == 1
        assert sorted(ids_of(engine)) == ["X", "Y"]

    def test_empty_engine(self):
        """Test an empty item set answers with empty results."""
        engine = RankingEngine()
        assert engine.current_pair() is None
        assert engine.ranking_list() == []
        assert engine.progress().total == 0
        assert not engine.is_locked("A")
        engine.toggle_lock("A")
        engine.swap(0, 1)
        engine.reorder(0, 1)
        assert engine.ranking_list() == []

    def test_replay_matches_live_votes(self):
        """Test replaying a vote list reproduces the same ranking."""
        votes = [("A", "B"), ("C", "B"), ("C", "A")]
        live = RankingEngine(songs("A", "B", "C"))
        for winner, loser in votes:
            live.record_vote(winner, loser)

        replayed = RankingEngine(songs("A", "B", "C"))
        assert replayed.replay(votes) == 3
        assert replayed.scores() == live.scores()
        assert replayed.progress() == live.progress()

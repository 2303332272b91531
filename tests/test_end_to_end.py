# Area: Engine Tests
# PRD: docs/prd-drawturn.md
"""Full game: three players, two rounds, rotation, ranking and reset."""

from conftest import PNG_DATA_URL, ROOM
from drawturn._fsm.enums import GameState
from drawturn._fsm.outbox import GAME_ENDED, STATE_CHANGED


class TestFullGame:
    """Plays A, B and C through a two-round game."""

    def play_round(self, harness, word, guesser, seconds_before_guess):
        session = harness.session
        assert session.current_state == GameState.WORD_SELECTION
        drawer = session.current_drawer_id
        harness.engine.select_word(ROOM, drawer, word)
        harness.engine.submit_drawing(ROOM, drawer, PNG_DATA_URL)
        harness.elapse(seconds_before_guess)
        harness.engine.submit_guess(ROOM, guesser, word)
        assert harness.session.current_state == GameState.ROUND_END
        return drawer

    def test_two_round_game(self, harness):
        harness.to_word_selection()

        first_drawer = self.play_round(harness, "gato", "B", 15)
        assert first_drawer == "A"
        assert harness.session.scores == {"A": 50, "B": 75, "C": 0}

        harness.expire()  # results timer → round 2
        assert harness.session.current_round == 2

        second_drawer = self.play_round(harness, "pez", "C", 30)
        assert second_drawer == "B"
        assert harness.session.scores == {"A": 50, "B": 125, "C": 50}

        harness.expire()  # last round → game end
        session = harness.session
        assert session.current_state == GameState.GAME_END
        assert session.current_round == 2

        ranking = [(e.player_id, e.score, e.rank) for e in session.final_ranking]
        # A reached 50 before C did
        assert ranking == [("B", 125, 1), ("A", 50, 2), ("C", 50, 3)]

        ended = harness.broadcasts(GAME_ENDED)[-1]
        assert ended["winner"]["player_id"] == "B"
        assert [e["player_id"] for e in ended["podium"]] == ["B", "A", "C"]
        assert ended["winner"]["display_name"] == "Player B"

        assert harness.leaderboard.top("global") == [("B", 125), ("A", 50), ("C", 50)]

        fresh = harness.engine.reset_game(ROOM)
        assert fresh.current_state == GameState.WAITING
        assert fresh.scores == {}
        assert harness.session is None

        # Readiness was cleared by the reset; players ready up again
        for user_id in ("A", "B", "C"):
            harness.directory.set_ready(ROOM, user_id)
        restarted = harness.engine.start_game(ROOM, actor_id="A")
        assert restarted.current_round == 1
        assert restarted.scores == {"A": 0, "B": 0, "C": 0}
        assert restarted.final_ranking == []

    def test_every_transition_is_announced(self, harness):
        harness.to_word_selection()
        self.play_round(harness, "gato", "B", 5)
        states = [p["state"] for p in harness.broadcasts(STATE_CHANGED)]
        assert states == [
            "STARTING", "WORD_SELECTION", "DRAWING", "GUESSING",
            "GUESSING", "ROUND_END",
        ]

    def test_rooms_do_not_interfere(self, harness):
        harness.to_guessing("gato", room_id="room-1")
        harness.to_word_selection(room_id="room-2")

        harness.engine.submit_guess("room-1", "B", "gato")

        assert harness.session_of("room-1").current_state == GameState.ROUND_END
        assert harness.session_of("room-2").current_state == GameState.WORD_SELECTION
        assert harness.session_of("room-2").scores == {"A": 0, "B": 0, "C": 0}

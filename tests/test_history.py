from __future__ import annotations

from natatro.engine.game import BalatroGame, GameConfig
from natatro.engine.history import RunHistory


def _played_game() -> BalatroGame:
    game = BalatroGame(config=GameConfig(seed=3))
    game.prepare_blind_select()
    game.start_round()
    game.target_score = 1
    game.select_card(game.hand.cards[0].id)
    game.play_hand()
    return game


def test_game_records_its_events() -> None:
    game = _played_game()
    types = [e.event_type for e in game.history.events]
    assert types == ["run_start", "blind_selected", "hand_played", "blind_result"]
    assert [e.timestamp for e in game.history.events] == [0, 1, 2, 3]

    result = game.history.of_type("blind_result")[0]
    assert result.blind_type == "Small"
    assert result.data["success"]
    assert result.data["hands_used"] == 1
    assert result.data["money_earned"] == 6


def test_summary_counts() -> None:
    game = _played_game()
    game.money = 100
    game.buy_joker(game.shop.jokers[0].id)

    summary = game.history.to_dict()["summary"]
    assert summary["blinds_won"] == 1
    assert summary["hands_played"] == 1
    assert summary["jokers_acquired"] == 1
    assert not summary["victory"]


def test_close_calls() -> None:
    history = RunHistory()
    history.add_blind_result(1, "Small", "Small Blind", score=310, required=300,
                             success=True, hands_used=4)
    history.add_blind_result(1, "Big", "Big Blind", score=2000, required=450,
                             success=True, hands_used=1)
    assert [e.data["blind"] for e in history.get_close_calls()] == ["Small Blind"]


def test_save_and_load(tmp_path) -> None:
    game = _played_game()
    path = tmp_path / "logs" / "run.json"
    game.history.save(str(path))

    loaded = RunHistory.load(str(path))
    assert loaded.to_dict() == game.history.to_dict()

    loaded.add_shop_reroll(1, 5)
    assert loaded.events[-1].timestamp == len(game.history.events)

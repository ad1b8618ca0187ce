"""
Run history tracking.
Captures the key events of a run so it can be summarised or saved.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional


@dataclass
class RunEvent:
    """Single event in a run."""
    ante: int
    blind_type: Optional[str]
    event_type: str  # "run_start", "blind_result", "joker_acquired", etc.
    data: dict
    timestamp: int = 0  # event sequence number


class RunHistory:
    """Captures the story of a run."""

    def __init__(self, seed: Optional[int] = None):
        self.events: list[RunEvent] = []
        self.metadata = {"seed": seed}
        self._event_counter = 0

    def add_event(self, ante: int, event_type: str, data: dict, blind_type: str = None):
        """Add an event to the history."""
        self.events.append(RunEvent(
            ante=ante,
            blind_type=blind_type,
            event_type=event_type,
            data=data,
            timestamp=self._event_counter
        ))
        self._event_counter += 1

    def add_run_start(self, money: int):
        self.add_event(ante=1, event_type="run_start", data={"starting_money": money})

    def add_blind_selected(self, ante: int, blind_type: str, blind_name: str, target: int):
        self.add_event(
            ante=ante,
            blind_type=blind_type,
            event_type="blind_selected",
            data={"blind": blind_name, "target": target}
        )

    def add_blind_skipped(self, ante: int, blind_type: str, tag: Optional[str]):
        self.add_event(
            ante=ante,
            blind_type=blind_type,
            event_type="blind_skipped",
            data={"tag": tag}
        )

    def add_hand_played(self, ante: int, blind_type: str, hand_type: str, score: int):
        self.add_event(
            ante=ante,
            blind_type=blind_type,
            event_type="hand_played",
            data={"hand_type": hand_type, "score": score}
        )

    def add_blind_result(self, ante: int, blind_type: str, blind_name: str, score: int,
                         required: int, success: bool, hands_used: int,
                         discards_used: int = 0, money_earned: int = 0):
        """Log blind attempt."""
        margin = score - required
        margin_pct = (margin / required * 100) if required > 0 else 0

        self.add_event(
            ante=ante,
            blind_type=blind_type,
            event_type="blind_result",
            data={
                "blind": blind_name,
                "score": score,
                "required": required,
                "success": success,
                "margin": margin,
                "margin_pct": round(margin_pct, 1),
                "hands_used": hands_used,
                "discards_used": discards_used,
                "money_earned": money_earned,
                "close_call": abs(margin_pct) < 20
            }
        )

    def add_joker_acquired(self, ante: int, joker_name: str, cost: int):
        self.add_event(
            ante=ante,
            event_type="joker_acquired",
            data={"joker": joker_name, "cost": cost}
        )

    def add_consumable_bought(self, ante: int, consumable_name: str, cost: int):
        self.add_event(
            ante=ante,
            event_type="consumable_bought",
            data={"name": consumable_name, "cost": cost}
        )

    def add_consumable_used(self, ante: int, consumable_name: str, consumable_type: str):
        self.add_event(
            ante=ante,
            event_type="consumable_used",
            data={"name": consumable_name, "type": consumable_type}
        )

    def add_voucher_acquired(self, ante: int, voucher_name: str, cost: int):
        self.add_event(
            ante=ante,
            event_type="voucher_acquired",
            data={"voucher": voucher_name, "cost": cost}
        )

    def add_shop_reroll(self, ante: int, cost: int):
        self.add_event(ante=ante, event_type="shop_reroll", data={"cost": cost})

    def add_run_end(self, final_ante: int, final_blind: str, blinds_beaten: int,
                    final_money: int, jokers: list, victory: bool = False):
        self.add_event(
            ante=final_ante,
            blind_type=final_blind,
            event_type="run_end",
            data={
                "victory": victory,
                "blinds_beaten": blinds_beaten,
                "final_money": final_money,
                "final_jokers": jokers,
            }
        )

    def of_type(self, event_type: str) -> list[RunEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def get_close_calls(self) -> list[RunEvent]:
        """Get all close call events."""
        return [e for e in self.of_type("blind_result") if e.data.get("close_call")]

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "metadata": self.metadata,
            "events": [asdict(e) for e in self.events],
            "summary": self._generate_summary()
        }

    def _generate_summary(self) -> dict:
        """Generate a quick summary of the run."""
        blind_results = self.of_type("blind_result")
        run_end = next(iter(self.of_type("run_end")), None)

        return {
            "total_blinds_attempted": len(blind_results),
            "blinds_won": sum(1 for e in blind_results if e.data.get("success")),
            "blinds_skipped": len(self.of_type("blind_skipped")),
            "hands_played": len(self.of_type("hand_played")),
            "close_calls": len(self.get_close_calls()),
            "jokers_acquired": len(self.of_type("joker_acquired")),
            "vouchers_acquired": len(self.of_type("voucher_acquired")),
            "consumables_used": len(self.of_type("consumable_used")),
            "victory": run_end.data.get("victory") if run_end else False
        }

    def save(self, filepath: str):
        """Save run history to JSON."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'RunHistory':
        """Load run history from JSON."""
        with open(filepath) as f:
            data = json.load(f)

        history = cls(seed=data["metadata"].get("seed"))
        history.metadata = data["metadata"]

        for event_data in data["events"]:
            history.events.append(RunEvent(**event_data))
            history._event_counter = max(history._event_counter, event_data["timestamp"] + 1)

        return history

"""
Main API for Natatro simulation.
Plays whole runs with an auto-play strategy and aggregates the results.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from .engine.consumables import ConsumableType
from .engine.game import BalatroGame, GameConfig, GamePhase
from .engine.history import RunHistory
from .engine.strategy import STRATEGIES

logger = logging.getLogger(__name__)

DEFAULT_MAX_ANTE = 8


@dataclass
class BlindDetail:
    """Details of a single blind attempt."""
    ante: int
    blind_type: str
    blind_name: str
    score: int
    required: int
    success: bool
    hands_used: int
    discards_used: int

    @property
    def margin_pct(self) -> float:
        if self.required == 0:
            return 0
        return (self.score - self.required) / self.required * 100


@dataclass
class RunSummary:
    """Summary of a simulation run."""
    seed: Optional[int]
    victory: bool
    ante_reached: int
    blind_reached: str
    blinds_beaten: int
    final_money: int
    jokers_collected: list[str]
    vouchers_acquired: list[str]
    planets_used: int
    hand_levels: dict[str, int]
    strategy_used: str
    blind_history: list[BlindDetail] = None
    history: RunHistory = None

    def __str__(self):
        result = "VICTORY!" if self.victory else "DEFEAT"
        lines = [
            f"{'='*50}",
            f"  {result} - Ante {self.ante_reached} {self.blind_reached}",
            f"{'='*50}",
            f"  Seed: {self.seed}",
            f"  Blinds beaten: {self.blinds_beaten}",
            f"  Final money: ${self.final_money}",
            f"  Jokers: {', '.join(self.jokers_collected) if self.jokers_collected else 'None'}",
            f"  Vouchers: {', '.join(self.vouchers_acquired) if self.vouchers_acquired else 'None'}",
            f"  Planets used: {self.planets_used}",
        ]

        leveled = {k: v for k, v in self.hand_levels.items() if v > 1}
        if leveled:
            levels_str = ", ".join(f"{k}:{v}" for k, v in sorted(leveled.items(), key=lambda x: -x[1])[:5])
            lines.append(f"  Hand levels: {levels_str}")

        lines.append(f"{'='*50}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "seed": self.seed,
            "victory": self.victory,
            "ante_reached": self.ante_reached,
            "blind_reached": self.blind_reached,
            "blinds_beaten": self.blinds_beaten,
            "final_money": self.final_money,
            "jokers_collected": self.jokers_collected,
            "vouchers_acquired": self.vouchers_acquired,
            "planets_used": self.planets_used,
            "hand_levels": self.hand_levels,
            "strategy_used": self.strategy_used,
        }


@dataclass
class BatchResult:
    """Results from multiple simulation runs."""
    runs: int
    wins: int
    win_rate: float
    avg_blinds: float
    avg_ante: float
    max_ante: int
    avg_money: float
    avg_jokers: float
    avg_planets: float
    ante_distribution: dict[int, int]
    strategy_used: str

    def __str__(self):
        lines = [
            f"{'='*50}",
            f"  BATCH RESULTS ({self.runs} runs)",
            f"  Strategy: {self.strategy_used}",
            f"{'='*50}",
            f"  Win rate: {self.wins}/{self.runs} ({self.win_rate:.1f}%)",
            f"  Avg blinds beaten: {self.avg_blinds:.1f}",
            f"  Avg ante reached: {self.avg_ante:.1f}",
            f"  Max ante reached: {self.max_ante}",
            f"  Avg final money: ${self.avg_money:.0f}",
            f"  Avg jokers collected: {self.avg_jokers:.1f}",
            f"  Avg planets used: {self.avg_planets:.1f}",
            "",
            "  Ante distribution:",
        ]

        for ante in sorted(self.ante_distribution.keys()):
            count = self.ante_distribution[ante]
            pct = count / self.runs * 100
            bar = "█" * int(pct / 2)
            lines.append(f"    Ante {ante}: {count:>3} ({pct:>5.1f}%) {bar}")

        lines.append(f"{'='*50}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "runs": self.runs,
            "wins": self.wins,
            "win_rate": self.win_rate,
            "avg_blinds": self.avg_blinds,
            "avg_ante": self.avg_ante,
            "max_ante": self.max_ante,
            "avg_money": self.avg_money,
            "avg_jokers": self.avg_jokers,
            "avg_planets": self.avg_planets,
            "ante_distribution": self.ante_distribution,
            "strategy_used": self.strategy_used,
        }


class Simulator:
    """
    Main simulator class.

    Usage:
        sim = Simulator()
        result = sim.run(seed=42)
        print(result)

        # Or run many:
        batch = sim.run_batch(runs=100, seed=1)
        print(batch)
    """

    def __init__(self, config: GameConfig = None, max_ante: int = DEFAULT_MAX_ANTE,
                 log_dir: str = None):
        """
        Args:
            config: Base game config; the seed is set per run
            max_ante: Clearing this ante's boss counts as a victory
            log_dir: When set, every run's history is saved there as JSON
        """
        self.config = config or GameConfig()
        self.max_ante = max_ante
        self.log_dir = Path(log_dir) if log_dir else None

    def _get_strategy(self, name: str):
        """Get strategy instance from its name."""
        if name not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {name}. Available: {sorted(STRATEGIES)}")
        return STRATEGIES[name]()

    def get_available_strategies(self) -> list[str]:
        return sorted(STRATEGIES)

    def run(self, seed: Optional[int] = None, strategy: str = "greedy",
            verbose: bool = False) -> RunSummary:
        """
        Play one run to GAME_OVER or past max_ante.

        Args:
            seed: RNG seed; the same seed and strategy replay the same run
            strategy: Strategy name from STRATEGIES
            verbose: Print each blind result during the run

        Returns:
            RunSummary with results
        """
        player = self._get_strategy(strategy)
        game = BalatroGame(config=replace(self.config, seed=seed))
        game.prepare_blind_select()
        victory = False

        while not game.is_over:
            if game.state == GamePhase.BLIND_SELECT:
                if not (player.should_skip(game) and game.skip_blind()):
                    game.start_round()
                    if verbose:
                        print(f"Ante {game.ante} {game.current_blind.name}: "
                              f"target {game.target_score:,}")

            elif game.state == GamePhase.PLAYING:
                if not player.play_turn(game):
                    # Out of cards with hands remaining
                    logger.info("seed %s: no playable cards, forfeiting blind", seed)
                    game.end_round(False)

            elif game.state == GamePhase.SHOP:
                if game.ante > self.max_ante:
                    victory = True
                    break
                player.shop(game)
                game.next_round()

        if victory:
            game.history.add_run_end(
                final_ante=game.ante,
                final_blind=game.current_blind.type.value,
                blinds_beaten=game.blinds_beaten,
                final_money=game.money,
                jokers=[j.name for j in game.jokers],
                victory=True,
            )

        if self.log_dir is not None:
            log_path = self.log_dir / f"run_{seed}_{strategy}.json"
            game.history.save(str(log_path))
            logger.debug("saved run history to %s", log_path)

        return self._summarize(game, seed, strategy, victory)

    def _summarize(self, game: BalatroGame, seed: Optional[int], strategy: str,
                   victory: bool) -> RunSummary:
        """Build a RunSummary from the game's final state and history."""
        blind_history = [
            BlindDetail(
                ante=e.ante,
                blind_type=e.blind_type,
                blind_name=e.data["blind"],
                score=e.data["score"],
                required=e.data["required"],
                success=e.data["success"],
                hands_used=e.data["hands_used"],
                discards_used=e.data["discards_used"],
            )
            for e in game.history.of_type("blind_result")
        ]
        planets_used = sum(
            1 for e in game.history.of_type("consumable_used")
            if e.data["type"] == ConsumableType.PLANET.value
        )
        vouchers = [e.data["voucher"] for e in game.history.of_type("voucher_acquired")]

        return RunSummary(
            seed=seed,
            victory=victory,
            ante_reached=game.ante,
            blind_reached=game.current_blind.name if game.current_blind else "",
            blinds_beaten=game.blinds_beaten,
            final_money=game.money,
            jokers_collected=[j.name for j in game.jokers],
            vouchers_acquired=vouchers,
            planets_used=planets_used,
            hand_levels=game.hand_levels.to_dict(),
            strategy_used=strategy,
            blind_history=blind_history,
            history=game.history,
        )

    def run_batch(self, runs: int = 100, seed: Optional[int] = None,
                  strategy: str = "greedy", verbose: bool = False) -> BatchResult:
        """
        Run multiple simulations and aggregate results.

        Run i uses seed + i when a seed is given, so a batch is reproducible.
        """
        if runs <= 0:
            raise ValueError("runs must be positive")

        wins = 0
        total_blinds = 0
        total_ante = 0
        max_ante = 0
        total_money = 0
        total_jokers = 0
        total_planets = 0
        ante_distribution = {}

        for i in range(runs):
            if verbose and (i + 1) % 10 == 0:
                print(f"  Run {i + 1}/{runs}...")

            run_seed = seed + i if seed is not None else None
            summary = self.run(seed=run_seed, strategy=strategy)

            if summary.victory:
                wins += 1
            total_blinds += summary.blinds_beaten
            total_ante += summary.ante_reached
            max_ante = max(max_ante, summary.ante_reached)
            total_money += summary.final_money
            total_jokers += len(summary.jokers_collected)
            total_planets += summary.planets_used

            ante_distribution[summary.ante_reached] = ante_distribution.get(summary.ante_reached, 0) + 1

        return BatchResult(
            runs=runs,
            wins=wins,
            win_rate=wins / runs * 100,
            avg_blinds=total_blinds / runs,
            avg_ante=total_ante / runs,
            max_ante=max_ante,
            avg_money=total_money / runs,
            avg_jokers=total_jokers / runs,
            avg_planets=total_planets / runs,
            ante_distribution=ante_distribution,
            strategy_used=strategy,
        )


# Convenience functions
def run(seed: Optional[int] = None, strategy: str = "greedy", verbose: bool = False) -> RunSummary:
    """Quick run with default simulator."""
    return Simulator().run(seed=seed, strategy=strategy, verbose=verbose)


def run_batch(runs: int = 100, seed: Optional[int] = None, strategy: str = "greedy") -> BatchResult:
    """Quick batch run with default simulator."""
    return Simulator().run_batch(runs=runs, seed=seed, strategy=strategy)

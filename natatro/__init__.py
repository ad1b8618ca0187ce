"""
Natatro - a Balatro-style card roguelike engine and simulator.
"""

from .engine.deck import Card, Deck, Hand, Suit
from .engine.hand_detector import HandType, DetectedHand, HandEvaluator
from .engine.scoring import JokerManager, ScoreResult, calculate_score
from .engine.game import BalatroGame, GameCallbacks, GameConfig, GamePhase, GameSnapshot

__version__ = "0.1.0"

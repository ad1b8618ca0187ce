"""
Natatro rules engine components.
"""

from .deck import Card, Deck, Hand, Suit, RANKS, RANK_VALUES
from .hand_detector import HandType, DetectedHand, HandEvaluator, HandLevels, evaluate_hand
from .jokers import Joker, JokerEffect, JokerKind, JokerTrigger, RunningTotals, JOKER_DEFINITIONS, apply_effect
from .scoring import BreakdownStep, JokerManager, ScoreResult, calculate_score
from .blinds import BlindType, BossBlind, BossEffect, CurrentBlind, BOSS_BLINDS, get_blind
from .consumables import Consumable, ConsumableType, CONSUMABLE_DEFINITIONS, PLANETS, TAROTS
from .vouchers import Voucher, VOUCHER_DEFINITIONS
from .tags import Tag, TAG_DEFINITIONS
from .shop import Shop, ShopConfig
from .history import RunEvent, RunHistory
from .game import BalatroGame, GameCallbacks, GameConfig, GamePhase, GameSnapshot, HandPlayedEvent, HandPreview

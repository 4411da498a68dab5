from .cost import CostModel
from .model import BaseModel, Miner
from .panda import Panda, extend_core, find_core, not_too_noisy, panda, panda_tiles
from .pattern import Pattern, PatternList
from .result import ResultState
from .transactions import Transaction, TransactionList, from_transactions

__all__ = [
    "panda",
    "panda_tiles",
    "Panda",
    "find_core",
    "extend_core",
    "not_too_noisy",
    "Transaction",
    "TransactionList",
    "from_transactions",
    "Pattern",
    "PatternList",
    "ResultState",
    "CostModel",
    "BaseModel",
    "Miner",
]

__version__ = "0.1.0"

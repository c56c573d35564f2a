from .greedy_agent import GreedyAgent
from .evaluation import BoardEvaluator, EvaluatorWeights
from .targeting import AttackOption, AttackRubric, enumerate_all_attacks, enumerate_attacks

__all__ = [
    "GreedyAgent",
    "BoardEvaluator",
    "EvaluatorWeights",
    "AttackOption",
    "AttackRubric",
    "enumerate_attacks",
    "enumerate_all_attacks",
]

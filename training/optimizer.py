"""
人工蜂群优化 (Artificial Bee Colony)

黑盒最大化 fitness。每轮分三个阶段:
- 雇佣蜂: 每个候选解各探索一次，有改进才保留
- 观察蜂: 按 fitness 比例挑选候选解继续探索
- 侦察蜂: 连续多次没有改进的候选解被重新生成
"""
from typing import List, Optional, Protocol, Sequence
from dataclasses import dataclass
import logging
import numpy as np

from policy.cost import CostModel, N_PARAMETERS
from .buffer import SampleBuffer

logger = logging.getLogger(__name__)


class Context(Protocol):
    """优化问题的定义"""

    def make(self) -> np.ndarray:
        """随机生成一个候选解"""
        ...

    def evaluate_fitness(self, solution: np.ndarray) -> float:
        """候选解的 fitness，越大越好"""
        ...

    def explore(self, field: Sequence['Candidate'], index: int) -> np.ndarray:
        """在 field[index] 附近生成一个新解"""
        ...


@dataclass
class Candidate:
    """候选解"""
    solution: np.ndarray
    fitness: float
    failures: int = 0


class Hive:
    """
    蜂群

    全局最优解只会变好，不会变差。
    """

    def __init__(
        self,
        context: Context,
        n_bees: int = 10,
        retries: int = 5,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Args:
            context: 优化问题
            n_bees: 候选解数量
            retries: 候选解连续失败多少次后被放弃
            rng: 随机数生成器
        """
        if n_bees <= 0:
            raise ValueError(f"n_bees must be positive, got {n_bees}")

        self.context = context
        self.n_bees = n_bees
        self.retries = retries
        self.rng = rng if rng is not None else np.random.default_rng()

        self.field: List[Candidate] = [self._new_candidate() for _ in range(n_bees)]
        self.best: Candidate = max(self.field, key=lambda c: c.fitness)
        self.rounds_run = 0

    def _new_candidate(self) -> Candidate:
        solution = self.context.make()
        return Candidate(solution, self.context.evaluate_fitness(solution))

    def _consider_best(self, candidate: Candidate):
        if candidate.fitness > self.best.fitness:
            self.best = Candidate(candidate.solution.copy(), candidate.fitness)

    def _work(self, index: int):
        """探索一次，有改进才替换"""
        solution = self.context.explore(self.field, index)
        fitness = self.context.evaluate_fitness(solution)

        if fitness > self.field[index].fitness:
            self.field[index] = Candidate(solution, fitness)
            self._consider_best(self.field[index])
        else:
            self.field[index].failures += 1

    def _onlooker_choices(self) -> np.ndarray:
        """按 fitness 比例挑选要继续探索的候选解"""
        fitness = np.array([c.fitness for c in self.field], dtype=np.float64)
        if np.isinf(fitness).any():
            weights = np.isinf(fitness).astype(np.float64)
        else:
            weights = np.clip(fitness, 0.0, None)

        total = weights.sum()
        if total <= 0:
            return self.rng.integers(0, self.n_bees, size=self.n_bees)
        return self.rng.choice(self.n_bees, size=self.n_bees, p=weights / total)

    def _scout(self):
        for i, candidate in enumerate(self.field):
            if candidate.failures >= self.retries:
                self.field[i] = self._new_candidate()
                self._consider_best(self.field[i])

    def run_round(self):
        for i in range(self.n_bees):
            self._work(i)
        for i in self._onlooker_choices():
            self._work(int(i))
        self._scout()
        self.rounds_run += 1

    def run_for_rounds(self, n_rounds: int) -> Candidate:
        """
        运行 n_rounds 轮

        Returns:
            目前找到的最优候选解 (0 轮时为初始种群中最好的)
        """
        for _ in range(n_rounds):
            self.run_round()
            logger.debug(f"Round {self.rounds_run}: best fitness {self.best.fitness:.6f}")
        return self.best


class CostFitness:
    """
    代价模型的拟合问题

    fitness = 1 / MSE，MSE 是模型预测的代价与实际间隔轮数的均方误差
    """

    def __init__(
        self,
        samples: SampleBuffer,
        init_low: float = -10.0,
        init_high: float = 10.0,
        explore_delta: float = 2.0,
        rng: Optional[np.random.Generator] = None,
    ):
        if init_low > init_high:
            raise ValueError(f"init_low ({init_low}) > init_high ({init_high})")

        self.weight_index, self.targets = samples.to_arrays(CostModel())
        self.init_low = init_low
        self.init_high = init_high
        self.explore_delta = explore_delta
        self.rng = rng if rng is not None else np.random.default_rng()

        if len(self.targets) == 0:
            logger.warning("No samples to fit, every candidate gets fitness 0")

    def make(self) -> np.ndarray:
        return self.rng.uniform(self.init_low, self.init_high, size=N_PARAMETERS)

    def predict(self, solution: np.ndarray) -> np.ndarray:
        """每个样本的预测代价"""
        solution = np.asarray(solution, dtype=np.float64)
        padded = np.append(solution, 0.0)
        # -1 指向末尾补的 0
        return padded[self.weight_index]

    def mean_squared_error(self, solution: np.ndarray) -> float:
        diff = self.targets - self.predict(solution)
        return float(np.mean(diff * diff))

    def evaluate_fitness(self, solution: np.ndarray) -> float:
        if len(self.targets) == 0:
            return 0.0
        mse = self.mean_squared_error(solution)
        if mse == 0.0:
            return float('inf')
        return 1.0 / mse

    def explore(self, field: Sequence[Candidate], index: int) -> np.ndarray:
        solution = field[index].solution.copy()
        i = self.rng.integers(0, N_PARAMETERS)
        solution[i] += self.rng.uniform(-self.explore_delta, self.explore_delta)
        return solution

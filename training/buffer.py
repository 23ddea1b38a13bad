"""
样本缓冲区

存储自博弈中收集的 (前一手, 同一玩家的后一手, 间隔轮数) 样本
"""
from typing import Iterable, List, Optional, Tuple
from dataclasses import dataclass
import threading
import numpy as np

from core.plays import Play
from policy.cost import CostModel


@dataclass(frozen=True)
class Sample:
    """
    单个训练样本

    Attributes:
        before: 某玩家打出的一手
        after: 同一玩家之后打出的一手
        turns_elapsed: 两手之间经过的轮数
    """
    before: Play
    after: Play
    turns_elapsed: int


class SampleBuffer:
    """
    线程安全的样本缓冲区

    各工作线程只追加，不读取彼此的数据。
    """

    def __init__(self):
        self._samples: List[Sample] = []
        self._lock = threading.Lock()

    def extend(self, samples: Iterable[Sample]):
        """追加一批样本"""
        samples = list(samples)
        with self._lock:
            self._samples.extend(samples)

    def snapshot(self) -> List[Sample]:
        """返回当前所有样本的副本"""
        with self._lock:
            return list(self._samples)

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def to_arrays(self, cost_model: Optional[CostModel] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        转换为向量化的特征

        Returns:
            (weight_index, targets)
            weight_index: 每个样本使用的权重编号，-1 表示代价恒为 0
            targets: 实际经过的轮数
        """
        cost_model = cost_model or CostModel()
        samples = self.snapshot()

        weight_index = np.full(len(samples), -1, dtype=np.int64)
        targets = np.zeros(len(samples), dtype=np.float64)

        for i, sample in enumerate(samples):
            index = cost_model.cost_index(sample.before, sample.after)
            if index is not None:
                weight_index[i] = index
            targets[i] = sample.turns_elapsed

        return weight_index, targets

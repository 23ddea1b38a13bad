"""
校准训练器

循环: 用当前权重自博弈采样 -> 蜂群拟合新权重
"""
from typing import Callable, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from pathlib import Path
import json
import logging
import time
import numpy as np

from policy.cost import DEFAULT_PARAMETERS, N_PARAMETERS

from .buffer import SampleBuffer
from .config import CalibrationConfig
from .optimizer import CostFitness, Hive
from .rollout import collect_samples

logger = logging.getLogger(__name__)


@dataclass
class TrainStats:
    """一次训练步的统计"""
    step: int = 0
    n_samples: int = 0
    loss: float = float('inf')
    parameters: List[float] = field(default_factory=list)
    elapsed: float = 0.0


class Callback:
    """回调基类"""

    def on_train_start(self, trainer: "Calibrator"):
        pass

    def on_train_end(self, trainer: "Calibrator"):
        pass

    def on_step_end(self, trainer: "Calibrator", step: int, stats: TrainStats):
        pass


class CheckpointCallback(Callback):
    """每 save_freq 步保存一次权重"""

    def __init__(self, save_dir: str, save_freq: int = 1):
        self.save_dir = Path(save_dir)
        self.save_dir.mkdir(parents=True, exist_ok=True)
        self.save_freq = save_freq

    def on_step_end(self, trainer: "Calibrator", step: int, stats: TrainStats):
        if step % self.save_freq == 0:
            path = self.save_dir / f"parameters_{step}.json"
            save_parameters(path, stats.parameters, loss=stats.loss)
            logger.info(f"Saved parameters to {path}")


class EarlyStoppingCallback(Callback):
    """loss 连续 patience 步没有下降则停止"""

    def __init__(self, patience: int = 3, min_delta: float = 0.0):
        self.patience = patience
        self.min_delta = min_delta
        self.best_loss = float('inf')
        self.wait = 0

    def on_step_end(self, trainer: "Calibrator", step: int, stats: TrainStats):
        if stats.loss < self.best_loss - self.min_delta:
            self.best_loss = stats.loss
            self.wait = 0
        else:
            self.wait += 1
            if self.wait >= self.patience:
                logger.info("Early stopping triggered")
                trainer.should_stop = True


def save_parameters(path, parameters: Sequence[float], loss: Optional[float] = None):
    """把权重保存为 JSON"""
    data = {"parameters": [float(p) for p in parameters]}
    if loss is not None:
        data["loss"] = float(loss)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def load_parameters(path) -> np.ndarray:
    """
    读取权重 (兼容直接保存的列表)

    Raises:
        ValueError: 长度不是 N_PARAMETERS
    """
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data["parameters"]
    parameters = np.array(data, dtype=np.float64)
    if parameters.shape != (N_PARAMETERS,):
        raise ValueError(f"Expected {N_PARAMETERS} parameters in {path}, got {parameters.shape}")
    return parameters


class Calibrator:
    """
    代价模型校准器

    Attributes:
        parameters: 当前权重
        global_step: 已完成的训练步数
        should_stop: 回调可以设置以提前结束
    """

    def __init__(
        self,
        config: Optional[CalibrationConfig] = None,
        parameters: Optional[Sequence[float]] = None,
        callbacks: Optional[List[Callback]] = None,
        collect_fn: Callable[..., SampleBuffer] = collect_samples,
    ):
        """
        Args:
            config: 校准配置
            parameters: 初始权重，None 使用默认值
            callbacks: 回调列表
            collect_fn: 采样函数，签名同 collect_samples
        """
        self.config = config or CalibrationConfig()
        self.parameters = np.array(
            DEFAULT_PARAMETERS if parameters is None else parameters, dtype=np.float64
        )
        self.callbacks = callbacks or []
        self.collect_fn = collect_fn
        self.rng = np.random.default_rng(self.config.seed)

        self.global_step = 0
        self.last_n_samples = 0
        self.should_stop = False

    def fit(self, samples: SampleBuffer) -> Tuple[np.ndarray, float]:
        """
        用蜂群在样本上拟合权重

        Returns:
            (最优权重, 均方误差)
        """
        context = CostFitness(
            samples,
            init_low=self.config.init_low,
            init_high=self.config.init_high,
            explore_delta=self.config.explore_delta,
            rng=self.rng,
        )
        hive = Hive(context, n_bees=self.config.n_bees, retries=self.config.retries, rng=self.rng)
        best = hive.run_for_rounds(self.config.n_rounds)

        loss = 1.0 / best.fitness if best.fitness > 0 else float('inf')
        return best.solution.copy(), loss

    def training_step(self, parameters: Optional[Sequence[float]] = None) -> Tuple[np.ndarray, float]:
        """
        一次训练步: 采样 + 拟合

        Returns:
            (新权重, 均方误差)
        """
        parameters = self.parameters if parameters is None else parameters
        samples = self.collect_fn(parameters, self.config)
        self.last_n_samples = len(samples)
        return self.fit(samples)

    def train(self, n_steps: int, log_interval: int = 1) -> TrainStats:
        """
        连续训练 n_steps 步，每步用上一步的结果作为新权重

        Returns:
            最后一步的统计
        """
        for callback in self.callbacks:
            callback.on_train_start(self)

        stats = TrainStats(parameters=self.parameters.tolist())
        start_time = time.time()

        while self.global_step < n_steps and not self.should_stop:
            step_start = time.time()
            parameters, loss = self.training_step()
            n_samples = self.last_n_samples
            self.parameters = parameters

            stats = TrainStats(
                step=self.global_step,
                n_samples=n_samples,
                loss=loss,
                parameters=parameters.tolist(),
                elapsed=time.time() - step_start,
            )

            if self.global_step % log_interval == 0:
                logger.info(
                    f"Step {self.global_step} | "
                    f"Samples {n_samples} | "
                    f"Loss {loss:.4f} | "
                    f"Time {time.time() - start_time:.0f}s"
                )

            for callback in self.callbacks:
                callback.on_step_end(self, self.global_step, stats)

            self.global_step += 1

        for callback in self.callbacks:
            callback.on_train_end(self)

        return stats

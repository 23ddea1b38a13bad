"""
Training Layer - 代价模型校准

Modules:
    config: 校准配置
    buffer: 样本缓冲区
    rollout: 自博弈采样
    optimizer: 人工蜂群优化
    trainer: 训练循环
"""
from .config import CalibrationConfig
from .buffer import (
    Sample,
    SampleBuffer,
)
from .rollout import (
    play_game,
    harvest_samples,
    collect_samples,
)
from .optimizer import (
    Candidate,
    Hive,
    CostFitness,
)
from .trainer import (
    TrainStats,
    Callback,
    CheckpointCallback,
    EarlyStoppingCallback,
    Calibrator,
    save_parameters,
    load_parameters,
)

__all__ = [
    # config
    "CalibrationConfig",
    # buffer
    "Sample",
    "SampleBuffer",
    # rollout
    "play_game",
    "harvest_samples",
    "collect_samples",
    # optimizer
    "Candidate",
    "Hive",
    "CostFitness",
    # trainer
    "TrainStats",
    "Callback",
    "CheckpointCallback",
    "EarlyStoppingCallback",
    "Calibrator",
    "save_parameters",
    "load_parameters",
]

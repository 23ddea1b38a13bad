"""
校准配置

定义自博弈采样和蜂群优化的超参数
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class CalibrationConfig:
    """
    校准配置

    Attributes:
        games_per_cpu: 每个 CPU 核心的对局数
        n_workers: 工作线程数，None 表示 CPU 核心数 × games_per_cpu
        search_depth: 自博弈时搜索的最大张数
        n_bees: 蜂群中候选解的数量
        n_rounds: 蜂群优化的轮数
        init_low: 初始候选解每一维的下界
        init_high: 初始候选解每一维的上界
        explore_delta: 探索时单维扰动的幅度
        retries: 候选解连续多少次没有改进后被放弃
        seed: 随机种子
    """
    # 采样
    games_per_cpu: int = 1
    n_workers: Optional[int] = None
    search_depth: int = 6

    # 蜂群优化
    n_bees: int = 10
    n_rounds: int = 10
    init_low: float = -10.0
    init_high: float = 10.0
    explore_delta: float = 2.0
    retries: int = 5

    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, d: dict) -> 'CalibrationConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

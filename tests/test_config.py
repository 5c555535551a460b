import pytest

from binimpurity.aggregators import GiniAggregator, VarianceAggregator
from binimpurity.config import ImpurityConfig
from binimpurity.errors import UnrecognizedImpurityError
from binimpurity.metrics import Entropy, Variance


def test_config_defaults() -> None:
    cfg = ImpurityConfig()
    assert cfg.impurity == "gini"
    assert cfg.num_classes == 2
    assert cfg.is_classification
    assert cfg.stats_size == 2
    assert isinstance(cfg.make_aggregator(), GiniAggregator)


def test_config_variance_stats_size() -> None:
    cfg = ImpurityConfig(impurity="variance", num_classes=9)
    assert not cfg.is_classification
    assert cfg.stats_size == 3
    assert cfg.make_impurity() == Variance()
    assert isinstance(cfg.make_aggregator(), VarianceAggregator)


def test_config_validation() -> None:
    with pytest.raises(UnrecognizedImpurityError):
        ImpurityConfig(impurity="friedman")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        ImpurityConfig(impurity="entropy", num_classes=1)


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BINIMPURITY_IMPURITY", "ENTROPY")
    cfg = ImpurityConfig.from_env(num_classes=4)
    assert cfg.impurity == "entropy"
    assert cfg.make_impurity() == Entropy()
    assert cfg.make_aggregator().stats_size == 4


def test_config_from_env_without_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BINIMPURITY_IMPURITY", raising=False)
    assert ImpurityConfig.from_env(impurity="variance").impurity == "variance"


def test_config_make_layout() -> None:
    layout = ImpurityConfig(num_classes=3).make_layout([4, 2], num_nodes=2)
    assert layout.stats_size == 3
    assert layout.size == 2 * 6 * 3

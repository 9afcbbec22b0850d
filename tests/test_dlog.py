import threading

import pytest

from eg_core.config import Settings, override_settings
from eg_core.dlog import DiscreteLog
from eg_core.errors import ConfigurationError, DiscreteLogError
from eg_core.group import ONE_MOD_P, g_pow_p


def test_small_exponents():
    dlog = DiscreteLog(100)
    assert dlog.discrete_log(ONE_MOD_P) == 0
    assert dlog.discrete_log(g_pow_p(42)) == 42
    assert dlog.discrete_log(g_pow_p(7)) == 7
    assert dlog.discrete_log(g_pow_p(100)) == 100


def test_table_grows_lazily():
    dlog = DiscreteLog(100)
    assert len(dlog) == 1
    dlog.discrete_log(g_pow_p(10))
    assert len(dlog) == 11
    dlog.discrete_log(g_pow_p(5))
    assert len(dlog) == 11


def test_bound_exceeded():
    dlog = DiscreteLog(10)
    with pytest.raises(DiscreteLogError) as info:
        dlog.discrete_log(g_pow_p(11))
    assert info.value.max_exponent == 10
    # still usable below the bound
    assert dlog.discrete_log(g_pow_p(3)) == 3


def test_default_bound_from_settings():
    override_settings(Settings(dlog_max=5))
    dlog = DiscreteLog()
    assert dlog.max_exponent == 5
    with pytest.raises(DiscreteLogError):
        dlog.discrete_log(g_pow_p(6))


def test_invalid_bound():
    with pytest.raises(ConfigurationError):
        DiscreteLog(0)


def test_concurrent_lookups():
    dlog = DiscreteLog(200)
    results = {}

    def worker(k):
        results[k] = dlog.discrete_log(g_pow_p(k))

    threads = [threading.Thread(target=worker, args=(k,)) for k in range(0, 200, 7)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == {k: k for k in range(0, 200, 7)}

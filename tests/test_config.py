import logging

import pytest

from eg_core.config import (
    DEFAULT_DLOG_MAX,
    Settings,
    get_settings,
    load_settings,
    override_settings,
)
from eg_core.errors import ConfigurationError, ProofVerificationError
from eg_core.logs import LOGGER_NAME, configure_logging
from eg_core.proof import ProofValidation, report


def test_defaults():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.dlog_max == DEFAULT_DLOG_MAX
    assert settings.prime_option == "standard"
    assert settings.strict_proofs is False


def test_environment_values():
    settings = load_settings(
        {
            "EG_CORE_PRIME_OPTION": "rfc2409_1024",
            "EG_CORE_DLOG_MAX": "50",
            "EG_CORE_STRICT_PROOFS": "yes",
            "EG_CORE_LOG_LEVEL": "debug",
        }
    )
    assert settings.prime_option == "rfc2409_1024"
    assert settings.dlog_max == 50
    assert settings.strict_proofs is True
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_bad_dlog_max(value):
    with pytest.raises(ConfigurationError):
        load_settings({"EG_CORE_DLOG_MAX": value})


def test_override_settings():
    override_settings(Settings(dlog_max=7))
    assert get_settings().dlog_max == 7
    override_settings(None)
    assert get_settings() is get_settings()


def test_report_only_raises_in_strict_mode(caplog):
    failed = ProofValidation("TestProof", {"a": True, "b": False})
    assert not failed
    assert failed.failures == ["b"]
    assert "b" in str(failed)
    with caplog.at_level(logging.WARNING, logger="eg_core.proof"):
        assert report(failed) is failed
    assert "TestProof" in caplog.text

    override_settings(Settings(strict_proofs=True))
    with pytest.raises(ProofVerificationError) as info:
        report(failed)
    assert info.value.validation is failed
    assert report(ProofValidation("TestProof", {"a": True}))


def test_configure_logging_adds_one_handler():
    logger = configure_logging("INFO")
    count = len(logger.handlers)
    configure_logging("DEBUG")
    assert logger.name == LOGGER_NAME
    assert len(logger.handlers) == count
    assert logger.level == logging.DEBUG

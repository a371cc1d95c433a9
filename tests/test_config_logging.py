"""
Tests for configuration and structured logging
"""

import json
import logging
from decimal import Decimal

import client_banking.config as config_module
from client_banking.config import ClientBankingConfig, get_config, reload_config
from client_banking.logging_config import JSONFormatter, log_action, setup_logging


class ListHandler(logging.Handler):
    """Collects formatted records"""

    def __init__(self):
        super().__init__()
        self.lines = []
        self.setFormatter(JSONFormatter())

    def emit(self, record):
        self.lines.append(self.format(record))


class TestConfig:
    """Test environment based configuration"""

    def test_defaults(self):
        config = ClientBankingConfig()

        assert config.api_port == 8090
        assert config.log_format == "json"
        assert config.enable_events is True
        assert config.max_transaction_decimal == Decimal("10000.00")
        assert config.max_history_size == 10000

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("CLIENT_BANKING_API_PORT", "9100")
        monkeypatch.setenv("CLIENT_BANKING_ENABLE_EVENTS", "false")
        monkeypatch.setenv("CLIENT_BANKING_MAX_TRANSACTION_AMOUNT", "250.50")

        config = ClientBankingConfig()

        assert config.api_port == 9100
        assert config.enable_events is False
        assert config.max_transaction_decimal == Decimal("250.50")

    def test_reload_config(self, monkeypatch):
        original = get_config()
        monkeypatch.setenv("CLIENT_BANKING_LOG_LEVEL", "DEBUG")
        try:
            reloaded = reload_config()
            assert reloaded.log_level == "DEBUG"
            assert get_config() is reloaded
        finally:
            config_module.config = original


class TestStructuredLogging:
    """Test JSON log output"""

    def setup_method(self):
        """Set up test fixtures"""
        self.logger = logging.getLogger("client_banking.tests.structured")
        self.logger.setLevel(logging.DEBUG)
        self.handler = ListHandler()
        self.logger.addHandler(self.handler)

    def teardown_method(self):
        self.logger.removeHandler(self.handler)

    def test_log_action_fields(self):
        log_action(
            self.logger, "warning", "Withdrawal rejected",
            account_id=5, action="withdrawal", reason="invalid_amount",
            extra={"amount": "20.00"}
        )

        entry = json.loads(self.handler.lines[0])

        assert entry["level"] == "WARNING"
        assert entry["message"] == "Withdrawal rejected"
        assert entry["account_id"] == 5
        assert entry["action"] == "withdrawal"
        assert entry["reason"] == "invalid_amount"
        assert entry["extra"] == {"amount": "20.00"}
        assert entry["logger"] == "client_banking.tests.structured"

    def test_absent_fields_are_omitted(self):
        log_action(self.logger, "info", "Plain message")

        entry = json.loads(self.handler.lines[0])

        assert "account_id" not in entry
        assert "reason" not in entry
        assert "extra" not in entry

    def test_exception_included(self):
        try:
            raise ValueError("bad amount")
        except ValueError:
            self.logger.exception("Failed")

        entry = json.loads(self.handler.lines[0])
        assert "ValueError: bad amount" in entry["exception"]


class TestSetupLogging:
    """Test logger setup"""

    def test_setup_replaces_handlers(self):
        name = "client_banking.tests.setup"
        setup_logging("INFO", name)
        logger = setup_logging("DEBUG", name)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_text_format(self):
        logger = setup_logging("INFO", "client_banking.tests.text", log_format="text")
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "banking.log"
        logger = setup_logging("INFO", "client_banking.tests.file", log_file=str(log_file))

        log_action(logger, "info", "Account created", account_id=1, action="create")
        for handler in logger.handlers:
            handler.flush()
            handler.close()

        entry = json.loads(log_file.read_text().strip())
        assert entry["action"] == "create"

"""Tests for configuration, wiring and the file-based email notifier."""

from email import message_from_bytes

import pytest

from backoffice.config import Config
from backoffice.domain.model.online_order import OnlineCustomer, OnlineOrder
from backoffice.domain.model.order import OrderLineItem
from backoffice.domain.model.status_policy import AllowListPolicy, TransitionGraphPolicy
from backoffice.domain.model.value_objects import Money, Quantity
from backoffice.infrastructure import bootstrap
from backoffice.infrastructure.notifications.file_email_notifier import (
    FileEmailNotifier,
)


class TestConfig:

    def test_defaults(self, monkeypatch):
        for name in ("BACKOFFICE_DATA_DIR", "BACKOFFICE_LOG_LEVEL", "BACKOFFICE_POS_STATUS_POLICY"):
            monkeypatch.delenv(name, raising=False)
        cfg = Config()
        assert cfg.LOG_LEVEL == "WARNING"
        assert cfg.POS_STATUS_POLICY == "allow_list"
        assert cfg.DEFAULT_STATE == "Huila"
        assert cfg.outbox_dir == cfg.DATA_DIR / "outbox"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BACKOFFICE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("BACKOFFICE_LOG_LEVEL", "debug")
        cfg = Config()
        assert cfg.DATA_DIR == tmp_path
        assert cfg.LOG_LEVEL == "DEBUG"

    @pytest.mark.parametrize(
        "name, policy_cls",
        [("allow_list", AllowListPolicy), ("transition_graph", TransitionGraphPolicy)],
    )
    def test_status_policy_selection(self, monkeypatch, name, policy_cls):
        monkeypatch.setenv("BACKOFFICE_POS_STATUS_POLICY", name)
        assert isinstance(bootstrap.status_policy(), policy_cls)


class TestFileEmailNotifier:

    def _order(self, email: str = "luis@example.com") -> OnlineOrder:
        return OnlineOrder.create(
            "WEB-250101-000042",
            OnlineCustomer(name="Luis", phone="300", email=email),
            [OrderLineItem("p1", "Mug", Quantity(2), Money.of("15000"))],
        )

    def test_writes_eml(self, tmp_path):
        FileEmailNotifier(tmp_path, sender="shop@example.com").send_order_confirmation(self._order())

        [path] = tmp_path.glob("*_WEB-250101-000042.eml")
        message = message_from_bytes(path.read_bytes())
        assert message["To"] == "luis@example.com"
        assert message["From"] == "shop@example.com"
        assert "WEB-250101-000042" in message["Subject"]
        assert "$30,000.00" in message.get_payload(decode=True).decode("utf-8")

    def test_missing_address_raises(self, tmp_path):
        with pytest.raises(ValueError):
            FileEmailNotifier(tmp_path).send_order_confirmation(self._order(email=""))

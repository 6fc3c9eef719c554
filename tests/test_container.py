"""Tests for mosdrones.container.Container."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from mosdrones.config.settings import build_settings
from mosdrones.container import Container
from mosdrones.estimator.static import StaticDeliveryEstimator


def _settings(**order):
    return build_settings(
        {
            "database": {"database": "mosdrones_test", "user": "testuser"},
            "order": order,
            "estimator": {"backend": "static", "static": {"serviceable_states": ["IL"]}},
        },
    )


class TestContainer:
    def test_wires_repositories_and_service(self):
        db = MagicMock()
        c = Container(_settings(package_id_max_attempts=3), db)

        assert c.db is db
        assert c.orders._package_id_attempts == 3
        assert c.orders._addresses is c.addresses
        assert isinstance(c.estimator, StaticDeliveryEstimator)
        assert c.order_service._orders is c.orders
        assert c.order_service._accounts is c.accounts

    def test_injected_estimator_skips_loading(self):
        estimator = MagicMock()
        with patch("mosdrones.container.load_estimator") as load:
            c = Container(_settings(), MagicMock(), estimator=estimator)
        load.assert_not_called()
        assert c.order_service._estimator is estimator

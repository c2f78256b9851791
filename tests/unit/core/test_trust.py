"""Unit tests for the trust gate."""

import pytest
from fakes import FakeStore
from pipctl.core.errors import UntrustedSourceError
from pipctl.core.trust import ensure_source_trusted
from pipctl.models.action import ActionType, PlannedAction


class TestEnsureSourceTrusted:
    """Tests for ensure_source_trusted."""

    def test_trusted_source_asks_nothing(self, store: FakeStore) -> None:
        """An already trusted source is left alone."""
        asked: list[PlannedAction] = []

        ensure_source_trusted(store, lambda a: asked.append(a) or True)

        assert asked == []
        assert store.trust_calls == 0

    def test_confirmed_trust(self, untrusted_store: FakeStore) -> None:
        """A confirmed trust action trusts the source."""
        asked: list[PlannedAction] = []

        def confirm(action: PlannedAction) -> bool:
            asked.append(action)
            return True

        ensure_source_trusted(untrusted_store, confirm)

        assert untrusted_store.trusted is True
        assert len(asked) == 1
        assert asked[0].action_type == ActionType.TRUST
        assert asked[0].package == "test-index"

    def test_declined_trust_raises(self, untrusted_store: FakeStore) -> None:
        """Declining leaves the source untrusted and raises."""
        with pytest.raises(UntrustedSourceError):
            ensure_source_trusted(untrusted_store, lambda action: False)

        assert untrusted_store.trusted is False
        assert untrusted_store.trust_calls == 0

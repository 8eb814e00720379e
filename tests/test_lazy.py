"""Tests for the lazy forwarding synthesizer."""

import threading

import pytest
from sample_types import Account, Complicated, Exploding, FactoryCounter, Named, Shape

from synthtype.descriptor import describe
from synthtype.errors import InternalInvariantError, InvalidTargetError
from synthtype.lazy import (
    LazyBase,
    is_materialized,
    lazy_for,
    lazy_for_keyed,
    synthesize_lazy,
)


class TestLazyFor:
    """The factory runs on first property access, and only then."""

    def test_materializes_on_first_read(self):
        factory = FactoryCounter()
        lazy = lazy_for(Complicated, factory)

        assert factory.calls == 0
        assert not is_materialized(lazy)

        assert lazy.its_complicated == 7

        assert factory.calls == 1
        assert is_materialized(lazy)

    def test_factory_runs_once(self):
        factory = FactoryCounter()
        lazy = lazy_for(Complicated, factory)

        lazy.its_complicated
        lazy.its_complicated
        lazy.its_complicated = 9

        assert lazy.its_complicated == 9
        assert factory.calls == 1

    def test_write_goes_to_real_instance(self):
        real = Complicated()
        lazy = lazy_for(Complicated, lambda: real)

        lazy.its_complicated = 11

        assert real.its_complicated == 11

    def test_concrete_method_reads_through_wrapper(self):
        factory = FactoryCounter(lambda: Complicated(5))
        lazy = lazy_for(Complicated, factory)

        assert lazy.doubled() == 10
        assert factory.calls == 1

    def test_is_instance_of_target(self):
        lazy = lazy_for(Complicated, Complicated)

        assert isinstance(lazy, Complicated)
        assert isinstance(lazy, LazyBase)

    def test_target_constructor_not_run(self):
        lazy = lazy_for(Exploding, lambda: None)

        assert not is_materialized(lazy)

    def test_factory_returning_none(self):
        lazy = lazy_for(Exploding, lambda: None)

        with pytest.raises(InvalidTargetError, match="returned None"):
            lazy.value

    def test_factory_must_be_callable(self):
        with pytest.raises(InvalidTargetError, match="must be callable"):
            lazy_for(Complicated, Complicated())

    def test_factory_error_propagates_and_retries(self):
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("database down")
            return Complicated()

        lazy = lazy_for(Complicated, flaky)

        with pytest.raises(RuntimeError, match="database down"):
            lazy.its_complicated
        assert not is_materialized(lazy)
        assert lazy.its_complicated == 7

    def test_concurrent_first_access_runs_factory_once(self):
        factory = FactoryCounter()
        lazy = lazy_for(Complicated, factory)
        barrier = threading.Barrier(8)
        values = []

        def worker():
            barrier.wait()
            values.append(lazy.its_complicated)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert values == [7] * 8
        assert factory.calls == 1


class TestLazyForKeyed:
    """The key property is readable and writable without materializing."""

    def test_key_read_does_not_materialize(self):
        factory = FactoryCounter(lambda: Account(42, "ada"))
        lazy = lazy_for_keyed(Account, "id", 42, factory)

        assert lazy.id == 42
        assert factory.calls == 0

    def test_key_write_does_not_materialize(self):
        factory = FactoryCounter(lambda: Account(42, "ada"))
        lazy = lazy_for_keyed(Account, "id", 42, factory)

        lazy.id = 43

        assert lazy.id == 43
        assert factory.calls == 0

    def test_other_property_materializes(self):
        factory = FactoryCounter(lambda: Account(42, "ada", 10.0))
        lazy = lazy_for_keyed(Account, "id", 42, factory)

        assert lazy.owner == "ada"
        assert lazy.deposit(5.0) == 15.0
        assert factory.calls == 1

    def test_key_is_not_forwarded(self):
        real = Account(1, "ada")
        lazy = lazy_for_keyed(Account, "id", 99, lambda: real)

        lazy.owner

        assert lazy.id == 99
        assert real.id == 1

    def test_unknown_key(self):
        with pytest.raises(InvalidTargetError, match="no property 'nope'"):
            lazy_for_keyed(Account, "nope", 1, lambda: Account(1, "x"))

    def test_keyed_type_name(self):
        assert synthesize_lazy(Account, "id").__name__ == "LazyAccount_id"
        assert synthesize_lazy(Account).__name__ == "LazyAccount"

    def test_keyed_descriptor_shares_keyed_type(self):
        assert synthesize_lazy(describe(Account).with_key("id")) is synthesize_lazy(Account, "id")

    def test_keyed_descriptor_does_not_replace_plain_type(self):
        keyed = synthesize_lazy(describe(Account).with_key("id"))
        factory = FactoryCounter(lambda: Account(42, "ada"))
        lazy = lazy_for(Account, factory)

        assert keyed.__name__ == "LazyAccount_id"
        assert type(lazy).__name__ == "LazyAccount"
        assert lazy.id == 42
        assert factory.calls == 1


class TestLazyErrors:
    """Tests for invalid lazy targets."""

    def test_protocol_rejected(self):
        with pytest.raises(InvalidTargetError, match="Interfaces can't be delegated to"):
            lazy_for(Named, lambda: None)

    def test_interface_abc_rejected(self):
        with pytest.raises(InvalidTargetError):
            synthesize_lazy(Shape)

    def test_interface_rejected_before_key_lookup(self):
        with pytest.raises(InvalidTargetError, match="Interfaces"):
            synthesize_lazy(Named, "missing")

    def test_is_materialized_rejects_other_objects(self):
        with pytest.raises(InvalidTargetError, match="not a lazy wrapper"):
            is_materialized(Complicated())

    def test_missing_lazy_state(self):
        handle = synthesize_lazy(Complicated)
        broken = object.__new__(handle)

        with pytest.raises(InternalInvariantError):
            broken.its_complicated

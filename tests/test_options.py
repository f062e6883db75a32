import pytest
from pydantic import ValidationError

from lazyinject.domain import UNSET, Resolver
from lazyinject.errors import InvalidArgument
from lazyinject.injector import DependencyInjector
from lazyinject.options import InjectorOptions, load_options


def test_defaults():
    options = load_options()
    assert options.debug_logging is False
    assert options.initial_dependencies == {}
    assert options.initial_pending == {}


def test_camel_case_aliases():
    options = load_options(
        {
            "debugLogging": True,
            "initialDependencies": {"test-dep": "test-value"},
            "initialPending": {"test-dep": []},
        }
    )
    assert options.debug_logging is True
    assert options.initial_dependencies == {"test-dep": "test-value"}
    assert options.initial_pending == {"test-dep": []}


def test_snake_case_names():
    options = InjectorOptions(debug_logging=True, initial_dependencies={"a": 1})
    assert options.debug_logging is True
    assert options.initial_dependencies == {"a": 1}


def test_model_instance_is_passed_through():
    options = InjectorOptions(debug_logging=True)
    assert load_options(options) is options


def test_unknown_option_is_rejected():
    with pytest.raises(InvalidArgument, match="Invalid injector options"):
        load_options({"verbose": True})


def test_non_mapping_is_rejected():
    with pytest.raises(InvalidArgument, match="must be a mapping"):
        load_options(["debugLogging"])


def test_unset_seed_is_rejected():
    with pytest.raises(InvalidArgument, match="seeded with UNSET"):
        load_options({"initialDependencies": {"a": UNSET}})


def test_non_callable_pending_entry_is_rejected():
    with pytest.raises(InvalidArgument, match="not callable"):
        load_options({"initialPending": {"a": ["not-a-function"]}})


def test_direct_construction_raises_validation_error():
    with pytest.raises(ValidationError):
        InjectorOptions(initial_pending={"a": [42]})


def test_assignment_is_validated():
    options = InjectorOptions()
    with pytest.raises(ValidationError):
        options.initial_dependencies = {"a": UNSET}


def test_pending_entries_keep_their_identity():
    handle = Resolver(lambda a: None, ["a"])
    options = load_options({"initialPending": {"a": [handle]}})
    assert options.initial_pending["a"][0] is handle


def test_injector_accepts_every_option_form():
    assert not DependencyInjector().debug
    assert DependencyInjector({"debugLogging": True}).debug
    assert DependencyInjector(InjectorOptions(debug_logging=True)).debug

    with pytest.raises(InvalidArgument):
        DependencyInjector({"debug": True})

from dataclasses import dataclass
from unittest import mock

import pytest

from subdomainx.retry import RetryError, retry


class _Flaky:
    def __init__(self, value, failures=1):
        self.value = value
        self.failures = failures
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError("first attempt failed")
        return self.value


@mock.patch("time.sleep")
def test_success_on_first_try(sleep):
    calls = []

    def fn():
        calls.append(1)
        return "success"

    assert retry(fn, 3, 10) == "success"
    assert len(calls) == 1
    sleep.assert_not_called()


@mock.patch("time.sleep")
def test_success_on_second_try(sleep):
    fn = _Flaky(42)
    assert retry(fn, 3, 10) == 42
    assert fn.calls == 2


@mock.patch("time.sleep")
def test_all_attempts_fail(sleep):
    calls = []

    def fn():
        calls.append(1)
        raise ValueError("persistent error")

    with pytest.raises(RetryError) as info:
        retry(fn, 3, 10)
    assert len(calls) == 3
    assert str(info.value) == "after 3 retries: persistent error"
    assert isinstance(info.value.last_error, ValueError)


@mock.patch("time.sleep")
def test_zero_retries(sleep):
    calls = []

    def fn():
        calls.append(1)
        return ""

    with pytest.raises(RetryError):
        retry(fn, 0, 10)
    assert calls == []


@mock.patch("time.sleep")
def test_with_struct(sleep):
    @dataclass
    class Item:
        name: str
        value: int

    fn = _Flaky(Item(name="test", value=123))
    assert retry(fn, 3, 10) == Item(name="test", value=123)
    assert fn.calls == 2


@mock.patch("time.sleep")
def test_with_list(sleep):
    fn = _Flaky(["a", "b", "c"])
    assert retry(fn, 3, 10) == ["a", "b", "c"]
    assert fn.calls == 2


@mock.patch("time.sleep")
def test_backoff_is_quadratic_and_capped(sleep):
    def fn():
        raise RuntimeError("always fail")

    with pytest.raises(RetryError):
        retry(fn, 3, 5)
    assert [c.args[0] for c in sleep.call_args_list] == [0, 1, 4]

    sleep.reset_mock()
    with pytest.raises(RetryError):
        retry(fn, 4, 5)
    assert [c.args[0] for c in sleep.call_args_list] == [0, 1, 4, 5]
import io

import pytest

from minishell.environment import Environment
from minishell.exporting import (
    add_quote_and_join,
    current_is_first,
    export,
    find_key_value,
    is_there_equal,
    is_valid_var,
    ordenate_table,
    print_detail_table,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("HOME", True),
        ("_x1", True),
        ("a_B_9", True),
        ("", False),
        ("1abc", False),
        ("a-b", False),
        ("a b", False),
        ("é", False),
    ],
)
def test_is_valid_var(text, expected):
    assert is_valid_var(text) is expected


def test_is_there_equal():
    assert is_there_equal("A=1") is True
    assert is_there_equal("A") is False


def test_find_key_value():
    assert find_key_value("A=b=c") == ("A", "b=c")
    assert find_key_value("=x") == ("", "x")
    assert find_key_value("A=") == ("A", "")
    assert find_key_value("A") is None


def test_add_quote_and_join():
    assert add_quote_and_join("HOME=/root") == 'HOME="/root"'
    assert add_quote_and_join("E=") == 'E=""'
    assert add_quote_and_join("FOO") == "FOO"


@pytest.mark.parametrize(
    "current, following, expected",
    [
        ("A", "B", True),
        ("B", "A", False),
        ("AB=1", "A=2", False),
        ("A=2", "AB=1", True),
        ("A=1", "A=2", True),
        ("A", "A=1", True),
    ],
)
def test_current_is_first(current, following, expected):
    assert current_is_first(current, following) is expected


def test_ordenate_table_is_sorted_permutation():
    lines = ["PATH=/bin", "A", "HOME=/root", "AB=1", "A_=2"]
    result = ordenate_table(lines)
    assert sorted(result) == sorted(lines)
    for first, second in zip(result, result[1:]):
        assert current_is_first(first, second)


def test_print_detail_table():
    out = io.StringIO()
    print_detail_table(Environment(["B=2", "A", "C=x"]), out)
    assert out.getvalue() == (
        'declare -x A\ndeclare -x B="2"\ndeclare -x C="x"\n'
    )


def test_export_without_operands_lists():
    env = Environment(["Z=1", "A=2"])
    out, err = io.StringIO(), io.StringIO()
    assert export(["export"], env, out, err) == 0
    assert out.getvalue().splitlines() == ['declare -x A="2"', 'declare -x Z="1"']
    assert err.getvalue() == ""


def test_export_inserts_variables():
    env = Environment(["A=1"])
    out, err = io.StringIO(), io.StringIO()
    assert export(["export", "A=new", "B", "C=c"], env, out, err) == 0
    assert env.lines == ["A=new", "B", "C=c"]
    assert out.getvalue() == ""


def test_export_invalid_identifier():
    env = Environment([])
    out, err = io.StringIO(), io.StringIO()
    status = export(["export", "1A=x", "OK=1", "-bad"], env, out, err)
    assert status == 1
    assert env.lines == ["OK=1"]
    assert err.getvalue() == "export: not a valid identifier\n" * 2


def test_export_empty_name_is_invalid():
    env = Environment([])
    err = io.StringIO()
    assert export(["export", "=value"], env, io.StringIO(), err) == 1
    assert env.lines == []
    assert "not a valid identifier" in err.getvalue()
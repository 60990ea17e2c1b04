import pytest

from cellforth import Forth
from cellforth.core import CompiledWord, InvalidWordReference, Op, ResourceExhaustion


def test_double(run):
    assert run(": double dup + ; 5 double .") == "10 "


def test_factorial(run):
    source = ": fact dup 1 > if dup 1 - fact * else drop 1 then ; 5 fact ."
    assert run(source) == "120 "


def test_counted_loop_prints_index(run):
    assert run(": count5 5 0 do i . loop ; count5") == "0 1 2 3 4 "


@pytest.mark.parametrize('flag, expected', [(-1, "yes "), (7, "yes "), (0, "no ")])
def test_if_else_then(run, flag, expected):
    run(": yn if 121 emit 101 emit 115 emit else 110 emit 111 emit then space ;")
    assert run(f"{flag} yn") == expected


def test_if_then_skips_to_after_then(run):
    run(": guard if 99 . then 1 . ;")
    assert run("0 guard") == "1 "
    assert run("-1 guard") == "99 1 "


def test_begin_until_runs_at_least_once(run):
    assert run(": once begin 1 . -1 until ; once") == "1 "
    run(": countdown begin dup . 1 - dup 0= until drop ;")
    assert run("3 countdown") == "3 2 1 "


def test_begin_while_repeat_tests_before_each_pass(run):
    run(": w begin dup 0 > while dup . 1 - repeat drop ;")
    assert run("0 w") == ""
    assert run("3 w") == "3 2 1 "


@pytest.mark.parametrize('limit, start', [(5, 0), (3, 3), (0, 5), (2, -2), (1, 0)])
def test_do_loop_iteration_count(forth, limit, start):
    forth.execute(": iters 0 -rot do 1+ loop ;")
    forth.push(limit, start).run("iters")
    assert forth.pop() == max(0, limit - start)
    assert len(forth.loops) == 0


def test_nested_loops_i_and_j(run):
    run(": grid 3 0 do 2 0 do j . i . loop loop ;")
    assert run("grid") == "0 0 0 1 1 0 1 1 2 0 2 1 "


def test_i_tracks_inner_loop_after_nested_exit(run):
    run(": mixed 2 0 do 2 0 do loop i . loop ;")
    assert run("mixed") == "0 1 "


def test_if_inside_loop(run):
    assert run(": evens 6 0 do i 2 mod 0= if i . then loop ; evens") == "0 2 4 "


def test_calls_see_only_current_inputs(run):
    run(": sq dup * ;")
    assert run("3 sq . 4 sq .") == "9 16 "
    run(": sum-to 0 swap 1+ 1 do i + loop ;")
    assert run("3 sum-to . 4 sum-to .") == "6 10 "


def test_words_call_words(run):
    run(": sq dup * ;")
    run(": quad sq sq ;")
    assert run("3 quad .") == "81 "


def test_recursion_depth_is_bounded(capsys):
    forth = Forth(max_call_depth=10)
    forth.execute(": down dup if 1 - down else drop then ;")
    forth.execute("5 down 42 .")
    assert capsys.readouterr().out == "42 "
    assert forth.interpret("50 down") is False
    assert "Resource exhausted" in capsys.readouterr().err
    assert forth._call_depth == 0
    assert len(forth.stack) == 0


def test_runaway_recursion_raises(forth):
    forth.execute(": forever forever ;")
    with pytest.raises(ResourceExhaustion):
        forth.execute_word(forth.lookup('forever'))
    assert forth._call_depth == 0


def test_invalid_cell_is_rejected(forth):
    word = CompiledWord('broken', (Op.LIT, 1, 'junk'))
    with pytest.raises(InvalidWordReference):
        forth.execute_word(word)
    with pytest.raises(InvalidWordReference):
        forth.execute_word('dup')


def test_error_inside_loop_resets_loop_stack(run, forth, capsys):
    run(": boom 3 0 do drop loop ;")
    assert forth.interpret("boom") is False
    assert "Stack underflow (value stack)" in capsys.readouterr().err
    assert len(forth.loops) == 0
    assert run("1 2 + .") == "3 "


def test_default_depth_allows_ordinary_recursion(run):
    run(": down dup if 1 - down else drop then ;")
    assert run("250 down 7 .") == "7 "

from cellforth import InteractiveForth, main


def feed(*lines):
    pending = list(lines)

    def get_input(prompt):
        if not pending:
            raise EOFError()
        return pending.pop(0)
    return get_input


def test_drop_on_empty_stack_recovers(forth, capsys):
    assert forth.interpret("drop") is False
    captured = capsys.readouterr()
    assert "Error: Stack underflow (value stack)" in captured.err
    assert forth.interpret("1 2 + .") is True
    assert capsys.readouterr().out == "3 "


def test_error_discards_rest_of_line(forth, capsys):
    assert forth.interpret("1 nosuch 2 .") is False
    assert "Unknown word 'nosuch'" in capsys.readouterr().err
    assert len(forth.stack) == 0


def test_unmatched_then_leaves_dictionary_unchanged(forth, capsys):
    names = forth.dictionary.names()
    assert forth.interpret(": bad then ;") is False
    assert "THEN without matching IF" in capsys.readouterr().err
    assert forth.dictionary.names() == names
    assert not forth.compiling


def test_definition_can_span_lines(forth, capsys):
    assert forth.interpret(": sq") is True
    assert forth.compiling
    forth.interpret("dup *")
    forth.interpret(";")
    assert not forth.compiling
    forth.interpret("3 sq .")
    assert capsys.readouterr().out == "9 "


def test_mode_errors(forth, capsys):
    assert forth.interpret("1 if") is False
    assert "'if' used outside a definition" in capsys.readouterr().err
    assert forth.interpret(";") is False
    assert forth.interpret(": a : b") is False
    assert "inside a definition" in capsys.readouterr().err
    assert forth.lookup('a') is None


def test_unknown_word_while_compiling(forth, capsys):
    assert forth.interpret(": bad 1 frob ;") is False
    assert forth.lookup('bad') is None
    assert forth.interpret("2 .") is True
    assert capsys.readouterr().out == "2 "


def test_repl_session(capsys):
    forth = InteractiveForth()
    forth.repl(get_input=feed(": sq dup * ;", "4 sq .", "drop", "quit", "5 ."))
    out = capsys.readouterr()
    assert out.out.startswith(InteractiveForth.banner)
    assert "16  ok" in out.out
    assert "5 " not in out.out.split("16  ok", 1)[1]
    assert "Error: Stack underflow" in out.err
    assert not forth.running


def test_repl_stops_at_end_of_input(capsys):
    forth = InteractiveForth()
    forth.repl(get_input=feed("1 2"))
    assert forth.stack.as_list() == [1, 2]
    assert forth.running


def test_sentinel_mid_line(forth, capsys):
    forth.execute("1 . bye 2 .\n3 .")
    assert capsys.readouterr().out == "1 "
    assert not forth.running


def test_python_api(forth):
    forth.push(2, 3).run("+")
    assert forth.pop() == 5
    forth.define('sq', 'dup *')
    forth(6).run('sq')
    assert forth.peek() == 36
    assert repr(forth) == "<InteractiveForth [36]>"


def test_main_eval(capsys):
    assert main(['-e', ': double dup + ; 5 double .']) == 0
    assert capsys.readouterr().out == "10 \n"


def test_main_file(tmp_path, capsys):
    source = tmp_path / "demo.fth"
    source.write_text(": fact dup 1 > if dup 1 - fact * else drop 1 then ;\n"
                      "5 fact .\n"
                      "drop\n"
                      "6 fact .\n")
    assert main([str(source)]) == 0
    captured = capsys.readouterr()
    assert captured.out == "120 720 \n"
    assert "Stack underflow" in captured.err


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.fth")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_interrupt_during_execution_resets_and_continues(capsys):
    forth = InteractiveForth()

    def slow():
        raise KeyboardInterrupt()
    forth.define_native('slow', slow)
    assert forth.repl(get_input=feed("1 2 slow 9 .", "3 .")) is forth
    out = capsys.readouterr().out
    assert "(Ctrl+C) interrupted" in out
    assert "9 " not in out
    assert "3  ok" in out
    assert len(forth.stack) == 0
    assert forth.running


def test_unclosed_paren_comment_is_an_error(forth, capsys):
    assert forth.interpret("1 ( open comment 2 .") is False
    assert "Unterminated ( comment" in capsys.readouterr().err
    assert len(forth.stack) == 0
    assert forth.interpret("4 ( closed ) .") is True
    assert capsys.readouterr().out == "4 "

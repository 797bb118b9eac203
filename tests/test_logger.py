import io

from petfeeder.logger import Logger


def test_print_has_no_newline():
    out = io.StringIO()
    log = Logger(out)
    log.print("abc")
    log.print("def")
    assert out.getvalue() == "abcdef"


def test_println_appends_newline():
    out = io.StringIO()
    log = Logger(out)
    log.print("a")
    log.println("b")
    log.println()
    assert out.getvalue() == "ab\n\n"


def test_println_number():
    out = io.StringIO()
    log = Logger(out)
    log.println(42)
    assert out.getvalue() == "42\n"


def test_default_stream_is_stdout(capsys):
    log = Logger()
    log.init()
    log.println("hello")
    assert capsys.readouterr().out == "hello\n"


def test_init_keeps_given_stream():
    out = io.StringIO()
    log = Logger(out)
    log.init()
    log.print("x")
    assert log.stream is out
    assert out.getvalue() == "x"
import pytest

from cellforth import InteractiveForth


@pytest.fixture
def forth():
    return InteractiveForth()


@pytest.fixture
def run(forth, capsys):
    """Execute source and return what it printed to stdout"""
    def _run(source):
        capsys.readouterr()
        forth.execute(source)
        return capsys.readouterr().out
    return _run

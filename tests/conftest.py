import pytest

YI_TRACE = """\
I  0400d7d4,8
 L 10,1
 M 20,1
 L 22,1
 S 18,1
 L 110,1
 L 210,1
 M 12,1
"""


@pytest.fixture
def write_trace(tmp_path):
    """Write trace text to a file and return its path as a string."""

    def _write(text, name="test.trace"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)

    return _write


@pytest.fixture
def yi_trace(write_trace):
    return write_trace(YI_TRACE, "yi.trace")

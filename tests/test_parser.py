import io
import random

import pytest

from bftree.ast import Block, Loop, Move, Update, Output, Input
from bftree.errors import BfError
from bftree.parser import Parser, parse_program
from bftree.types import SourcePosition


def count_instructions(node):
    if isinstance(node, Block):
        return sum(count_instructions(child) for child in node.body)
    if isinstance(node, Loop):
        return count_instructions(node.body)
    return 1


class FailingStream:
    """Yields `data` one byte at a time, then raises OSError."""
    def __init__(self, data: bytes):
        self.data = data

    def read(self, n):
        if not self.data:
            raise OSError('disk on fire')
        chunk, self.data = self.data[:n], self.data[n:]
        return chunk


def test_each_instruction_maps_to_its_node():
    program = parse_program('<>+-.,')
    assert [type(n) for n in program.body] == [Move, Move, Update, Update, Output, Input]
    assert program.body[0].step == -1
    assert program.body[1].step == 1
    assert program.body[2].delta == 1
    assert program.body[3].delta == -1


def test_loop_wraps_nested_block():
    program = parse_program('+[->[.]<]')
    assert len(program.body) == 2
    loop = program.body[1]
    assert isinstance(loop, Loop)
    assert [type(n) for n in loop.body.body] == [Update, Move, Loop, Move]
    inner = loop.body.body[2]
    assert [type(n) for n in inner.body.body] == [Output]


def test_positions_track_lines_and_columns():
    program = parse_program('+\n ab>')
    plus, move = program.body
    assert program.pos == SourcePosition(0, 1, 0)
    assert plus.pos == SourcePosition(1, 1, 1)
    assert move.pos == SourcePosition(6, 2, 4)


def test_loop_is_stamped_at_its_open_bracket():
    program = parse_program('x[\n+]')
    loop = program.body[0]
    assert loop.pos == SourcePosition(2, 1, 2)
    assert loop.body.pos == loop.pos
    assert loop.body.body[0].pos == SourcePosition(4, 2, 1)


def test_non_instruction_bytes_are_skipped():
    program = parse_program('This is a comment\nwith no instructions at all\n')
    assert isinstance(program, Block)
    assert program.body == []


def test_unexpected_close_bracket():
    with pytest.raises(BfError) as excinfo:
        parse_program('+\n+]')
    err = excinfo.value.err
    assert err.name == 'SyntaxError'
    assert err.pos == SourcePosition(4, 2, 2)
    assert 'unexpected close bracket at line 2, column 2' in str(excinfo.value)


def test_close_bracket_after_balanced_loop():
    with pytest.raises(BfError) as excinfo:
        parse_program('[]]')
    assert excinfo.value.err.pos == SourcePosition(3, 1, 3)


def test_unclosed_open_bracket_is_permissive_by_default():
    program = parse_program('+[[-')
    outer = program.body[1]
    inner = outer.body.body[0]
    assert isinstance(inner, Loop)
    assert isinstance(inner.body.body[0], Update)


def test_unclosed_open_bracket_in_strict_mode():
    with pytest.raises(BfError) as excinfo:
        parse_program('+[[-]', strict=True)
    err = excinfo.value.err
    assert err.name == 'SyntaxError'
    assert err.pos == SourcePosition(2, 1, 2)
    assert 'unclosed open bracket' in err.message


def test_strict_mode_accepts_balanced_program():
    program = parse_program('+[>[-]<]', strict=True)
    assert count_instructions(program) == 4


def test_io_error_aborts_parsing():
    parser = Parser()
    with pytest.raises(BfError) as excinfo:
        parser.parse(FailingStream(b'+\n+'))
    err = excinfo.value.err
    assert err.name == 'IOError'
    assert err.pos == SourcePosition(3, 2, 1)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert isinstance(parser.error, OSError)


def test_io_error_inside_loop_wins_over_strict_check():
    with pytest.raises(BfError) as excinfo:
        Parser(strict=True).parse(FailingStream(b'[+'))
    assert excinfo.value.err.name == 'IOError'


def test_text_streams_are_accepted():
    program = Parser().parse(io.StringIO('+[-]'))
    assert count_instructions(program) == 2


def test_parse_file(tmp_path):
    path = tmp_path / 'prog.bf'
    path.write_bytes(b'++ add two\n.')
    program = Parser().parse_file(path)
    assert [type(n) for n in program.body] == [Update, Update, Output]


def test_parse_file_reports_syntax_error(tmp_path):
    path = tmp_path / 'bad.bf'
    path.write_bytes(b']')
    with pytest.raises(BfError):
        Parser().parse_file(path)


def random_program(rng, depth=0):
    parts = []
    for _ in range(rng.randint(0, 12)):
        roll = rng.random()
        if roll < 0.15 and depth < 4:
            parts.append('[' + random_program(rng, depth + 1) + ']')
        elif roll < 0.6:
            parts.append(rng.choice('<>+-.,'))
        else:
            parts.append(rng.choice('abc xyz\n\t#!0123'))
    return ''.join(parts)


@pytest.mark.parametrize('seed', range(20))
def test_instruction_count_matches_source(seed):
    source = random_program(random.Random(seed))
    program = parse_program(source)
    expected = sum(source.count(c) for c in '<>+-.,')
    assert count_instructions(program) == expected


def test_text_stream_positions_count_bytes():
    program = Parser().parse(io.StringIO('é+'))
    assert program.body[0].pos == SourcePosition(3, 1, 3)


def test_deeply_nested_loops():
    depth = 5000
    program = parse_program('[' * depth + '+' + ']' * depth)
    node = program
    for _ in range(depth):
        (node,) = node.body
        assert isinstance(node, Loop)
        node = node.body
    assert isinstance(node.body[0], Update)


def test_deeply_nested_unclosed_bracket_in_strict_mode():
    with pytest.raises(BfError) as excinfo:
        parse_program('[' * 3000 + ']' * 2999, strict=True)
    assert excinfo.value.err.pos == SourcePosition(1, 1, 1)

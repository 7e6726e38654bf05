import io

import pytest

from brainfuck import (
    MEMORY_SIZE,
    BrainfuckInterpreter,
    Instruction,
    InputExhausted,
    MalformedProgram,
    TapeBoundsViolation,
    UnknownInstruction,
    build_jump_table,
    decode_program,
)
from bf_io import BufferOutput, LineInput, ScriptedInput, StreamOutput


def make(code, lines=()):
    out = BufferOutput()
    itp = BrainfuckInterpreter(code.encode("ascii"), output=out, input_source=ScriptedInput(lines))
    return itp, out


def test_decode_known_bytes():
    assert Instruction.decode(ord('+')) is Instruction.INCREMENT
    assert Instruction.decode(ord(']')) is Instruction.JUMP_IF_NONZERO
    assert "".join(i.char for i in Instruction) == "+-><.,[]"


def test_decode_unknown_byte_reports_position():
    with pytest.raises(UnknownInstruction) as exc:
        decode_program(b"+-x")
    assert exc.value.byte == ord('x')
    assert exc.value.position == 2
    assert exc.value.kind == "UnknownInstruction"


def test_interpreter_rejects_unfiltered_source():
    with pytest.raises(UnknownInstruction):
        BrainfuckInterpreter(b"+ +")


def test_jump_table_nested():
    program = decode_program(b"[[-]+[>]]")
    table = build_jump_table(program)
    assert dict(table) == {0: 8, 8: 0, 1: 3, 3: 1, 5: 7, 7: 5}
    for pos, op in enumerate(program):
        if op == Instruction.JUMP_IF_ZERO:
            assert table[pos] > pos
            assert table[table[pos]] == pos


def test_jump_table_is_read_only():
    table = build_jump_table(decode_program(b"[]"))
    with pytest.raises(TypeError):
        table[0] = 5


def test_unmatched_close_bracket():
    with pytest.raises(MalformedProgram) as exc:
        build_jump_table(decode_program(b"+[]]"))
    assert exc.value.position == 3


def test_unmatched_open_bracket():
    with pytest.raises(MalformedProgram) as exc:
        build_jump_table(decode_program(b"[+[]"))
    assert exc.value.position == 0


def test_decrement_wraps_to_255_and_back():
    itp, _ = make("-")
    itp.run()
    assert itp.peek() == 255
    itp, _ = make("-+")
    itp.run()
    assert itp.peek() == 0


def test_increment_wraps_from_255():
    itp, _ = make("-+")
    itp.step()
    assert itp.peek() == 255
    itp.step()
    assert itp.peek() == 0

    itp, _ = make("-+-")
    itp.run()
    assert itp.peek() == 255


def test_move_right_full_cycle():
    itp, _ = make(">" * MEMORY_SIZE)
    itp.step()
    assert itp.pointer == 1
    itp.run()
    assert itp.pointer == 0


def test_move_left_wraps_from_zero():
    itp, _ = make("<")
    itp.run()
    assert itp.pointer == MEMORY_SIZE - 1

    itp, _ = make("<" * MEMORY_SIZE)
    itp.run()
    assert itp.pointer == 0


def test_print_capital_a():
    itp, out = make("++++++++[>++++++++<-]>+.")
    itp.run()
    assert out.getvalue() == "A"
    assert itp.finished
    assert itp.peek(0) == 0
    assert itp.peek(1) == 65


def test_echo_first_character_of_line():
    itp, out = make(",.", ["Q"])
    itp.run()
    assert out.getvalue() == "Q"


def test_line_input_from_stream():
    stream = io.StringIO("Qwerty\n\nZ")
    out = BufferOutput()
    itp = BrainfuckInterpreter(b",.,.,.,", output=out, input_source=LineInput(stream))
    with pytest.raises(InputExhausted) as exc:
        itp.run()
    assert exc.value.position == 6
    assert out.values == [ord('Q'), 10, ord('Z')]


def test_line_input_reads_raw_bytes():
    itp = BrainfuckInterpreter(b",", output=BufferOutput(),
                               input_source=LineInput(io.BytesIO(b"\xff\n")))
    itp.run()
    assert itp.peek() == 255


def test_line_input_undecodable_text():
    stream = io.TextIOWrapper(io.BytesIO(b"\xfe\n"), encoding="utf-8", errors="surrogateescape")
    itp = BrainfuckInterpreter(b",", output=BufferOutput(), input_source=LineInput(stream))
    itp.run()
    assert itp.peek() == 254


def test_line_input_defaults_to_stdin_buffer(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"\xff\n"), encoding="utf-8"))
    itp = BrainfuckInterpreter(b",", output=BufferOutput())
    itp.run()
    assert itp.peek() == 255


def test_input_exhausted():
    itp, _ = make("+,", [])
    with pytest.raises(InputExhausted) as exc:
        itp.run()
    assert exc.value.position == 1


def test_empty_loop_on_zero_cell():
    itp, _ = make("[]")
    assert itp.step()
    assert itp.instruction_pointer == 2
    assert not itp.step()
    assert itp.steps == 1


def test_loop_skips_body_and_lands_past_close():
    itp, out = make("[+.]+.")
    itp.run()
    assert out.values == [1]


def test_output_order_is_preserved():
    itp, out = make("+.+.+.")
    itp.run()
    assert out.values == [1, 2, 3]


def test_missing_jump_target():
    program = decode_program(b"[]")
    itp = BrainfuckInterpreter(program, output=BufferOutput(), jump_table={})
    with pytest.raises(MalformedProgram) as exc:
        itp.run()
    assert exc.value.position == 0


def test_shared_jump_table_between_runs():
    program = decode_program(b"++[>+<-]>.")
    table = build_jump_table(program)
    outs = []
    for _ in range(2):
        out = BufferOutput()
        BrainfuckInterpreter(program, output=out, jump_table=table).run()
        outs.append(out.values)
    assert outs == [[2], [2]]


def test_peek_out_of_bounds():
    itp, _ = make("")
    with pytest.raises(TapeBoundsViolation):
        itp.peek(MEMORY_SIZE)
    with pytest.raises(TapeBoundsViolation):
        itp.peek(-1)


def test_reset_clears_state():
    itp, _ = make("+>+")
    itp.run()
    itp.reset()
    assert itp.pointer == 0
    assert itp.instruction_pointer == 0
    assert itp.peek(0) == 0 and itp.peek(1) == 0
    assert not itp.finished


def test_stream_output_writes_characters():
    stream = io.StringIO()
    BrainfuckInterpreter(b"++++++++[>++++++++<-]>+.",
                         output=StreamOutput(stream)).run()
    assert stream.getvalue() == "A"

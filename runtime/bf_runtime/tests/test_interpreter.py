"""
Test suite for the interpreter

Verifies dispatch, lazy bracket matching, input/output and terminal status.
"""

import pytest

from bf_runtime.interpreter import (
    Interpreter, RunResult, run_bf, execute_bf, validate_brackets, as_program,
)
from bf_runtime.channels import BufferSink, CallableSink
from bf_runtime.config import EOFPolicy, RuntimeConfig
from bf_runtime.errors import (
    BFError, UnmatchedBracketError, AllocationError, InputError, OutputError, StepLimitError,
    Status,
)


class TestBasicPrograms:
    """Test complete programs"""

    def test_letter_a(self):
        result, output = run_bf('++++++++[>++++++++<-]>+.')
        assert result.status is Status.SUCCESS
        assert output == b'A'

    def test_hello_world(self, hello_world):
        assert execute_bf(hello_world) == b'Hello World!\n'

    def test_empty_program(self):
        result, output = run_bf(b'')
        assert result.ok
        assert result.steps == 0
        assert output == b''

    def test_comments_only(self):
        for n in (1, 10, 5000):
            result, output = run_bf(b'x' * n)
            assert result.ok
            assert result.steps == 0
            assert output == b''

    def test_comments_are_skipped(self):
        assert execute_bf('add one + and print . done') == b'\x01'

    def test_non_ascii_bytes_are_no_ops(self):
        assert execute_bf(bytes([0xff, ord('+'), 0x00, ord('.'), 0x80])) == b'\x01'

    def test_cell_arithmetic_wraps(self):
        assert execute_bf('-.') == b'\xff'
        assert execute_bf('+' * 256 + '.') == b'\x00'
        assert execute_bf('+' * 300 + '-' * 30 + '.') == bytes([14])

    def test_long_cursor_walk(self):
        program = '+++' + '>' * 10000 + '<' * 10000 + '.'
        result, output = run_bf(program)
        assert result.ok
        assert output == b'\x03'

    def test_move_left_of_start(self):
        assert execute_bf('<<<+++.>>>.') == b'\x03\x00'


class TestLoops:
    """Test bracket semantics"""

    def test_loop_skipped_when_cell_zero(self):
        # Body would print if entered
        assert execute_bf('[.]') == b''

    def test_loop_runs_until_cell_cleared(self):
        assert execute_bf('+++[>+.<-]') == b'\x01\x02\x03'

    def test_body_runs_once_when_entered(self):
        # Body leaves the entry cell untouched and exits on a zero cell
        result, output = run_bf('+[>.]')
        assert result.ok
        assert output == b'\x00'

    def test_body_runs_zero_times_when_not_entered(self):
        result, output = run_bf('[>.]')
        assert result.ok
        assert output == b''

    def test_nested_loops(self):
        # 3 * 4 * 5 = 60
        assert execute_bf('+++[>++++[>+++++<-]<-]>>.') == bytes([60])

    def test_skip_nested_loop(self):
        assert execute_bf('[[+]+].+.') == b'\x00\x01'

    def test_clear_loop(self):
        assert execute_bf('+++++[-].') == b'\x00'

    def test_loop_with_comments_inside(self):
        assert execute_bf('++[ loop body > + < - ] > .') == b'\x02'


class TestUnmatchedBrackets:
    """Test lazy detection of malformed programs"""

    @pytest.mark.parametrize("program", ['[', ']', '[[]', '+]', '[]]', '[[', 'abc[', '+['])
    def test_unmatched_programs(self, program):
        result, _ = run_bf(program)
        assert result.status is Status.UNMATCHED_BRACKET
        assert isinstance(result.error, UnmatchedBracketError)

    def test_close_is_checked_even_when_not_jumping(self):
        result, output = run_bf('.].')
        assert result.status is Status.UNMATCHED_BRACKET
        assert result.error.position == 1
        assert output == b'\x00'

    def test_open_is_checked_even_when_entering(self):
        result, _ = run_bf('+.[')
        assert result.status is Status.UNMATCHED_BRACKET
        assert result.error.position == 2

    def test_unreached_bracket_is_not_checked(self):
        # The stray ']' is never evaluated: the run stops in the infinite loop first
        config = RuntimeConfig(max_steps=50)
        result, _ = run_bf('+[]]', config=config)
        assert result.status is Status.STEP_LIMIT

        config = RuntimeConfig(max_steps=50, check_brackets=True)
        result, _ = run_bf('+[]]', config=config)
        assert result.status is Status.UNMATCHED_BRACKET

    def test_forward_scan_position(self):
        result, _ = run_bf('++>[')
        assert result.error.position == 3

    def test_backward_scan_position(self):
        result, _ = run_bf('+ ]')
        assert result.error.position == 2

    def test_output_before_error_is_kept(self):
        result, output = run_bf('+.+.]')
        assert result.status is Status.UNMATCHED_BRACKET
        assert output == b'\x01\x02'

    def test_execute_raises(self):
        with pytest.raises(UnmatchedBracketError) as exc_info:
            execute_bf('+]')
        assert 'E_UNMATCHED_BRACKET' in str(exc_info.value)

    def test_check_brackets_rejects_unreached_bracket(self):
        config = RuntimeConfig(check_brackets=True)
        result, output = run_bf('.]', config=config)
        assert result.status is Status.UNMATCHED_BRACKET
        assert output == b''

    def test_check_brackets_accepts_balanced(self, hello_world):
        config = RuntimeConfig(check_brackets=True)
        assert execute_bf(hello_world, config=config) == b'Hello World!\n'


class TestValidateBrackets:
    """Test the static bracket check"""

    def test_balanced(self):
        validate_brackets('[[][]]')
        validate_brackets(b'no brackets')

    def test_stray_close(self):
        with pytest.raises(UnmatchedBracketError) as exc_info:
            validate_brackets('[]]')
        assert exc_info.value.position == 2

    def test_unclosed_open_reports_innermost(self):
        with pytest.raises(UnmatchedBracketError) as exc_info:
            validate_brackets('[[]+[')
        assert exc_info.value.position == 4


class TestInput:
    """Test ',' and the end-of-input policies"""

    def test_echo(self):
        assert execute_bf(',.', input=b'\x41') == b'\x41'

    def test_echo_all(self):
        assert execute_bf(',[.,]', input=b'hello') == b'hello'

    def test_no_input_stores_zero(self):
        result, output = run_bf('+,.')
        assert result.ok
        assert output == b'\x00'
        assert result.bytes_read == 0

    def test_eof_unchanged(self):
        config = RuntimeConfig(eof_policy=EOFPolicy.UNCHANGED)
        assert execute_bf('+++,.', config=config) == b'\x03'

    def test_eof_minus_one(self):
        config = RuntimeConfig(eof_policy=EOFPolicy.MINUS_ONE)
        assert execute_bf(',.', config=config) == b'\xff'

    def test_string_input(self):
        assert execute_bf(',.,.', input='hi') == b'hi'

    def test_counters(self):
        result, _ = run_bf(',.,.,.', input=b'ab')
        assert result.bytes_read == 2
        assert result.bytes_written == 3
        assert result.steps == 6


class TestOutput:
    """Test output sink failures"""

    def test_sink_rejects(self):
        sink = CallableSink(lambda value: False)
        result = Interpreter('+.', sink=sink).run()
        assert result.status is Status.IO_ERROR
        assert isinstance(result.error, OutputError)
        assert result.error.position == 1

    def test_full_buffer(self):
        sink = BufferSink(limit=2)
        result = Interpreter('+.+.+.', sink=sink).run()
        assert result.status is Status.IO_ERROR
        assert sink.getvalue() == b'\x01\x02'


class BrokenInput:
    """Binary stream whose reads fail at the device"""

    def read(self, size=-1):
        raise OSError(5, "Input/output error")


class TestInputFailure:
    """Test input stream failures"""

    def test_failing_stream_ends_run_with_io_error(self):
        sink = BufferSink()
        result = Interpreter('+.,.', sink=sink, source=BrokenInput()).run()
        assert result.status is Status.IO_ERROR
        assert isinstance(result.error, InputError)
        assert result.error.position == 2
        assert sink.getvalue() == b'\x01'

    def test_execute_raises_input_error(self):
        with pytest.raises(InputError):
            Interpreter(',', source=BrokenInput()).execute()


class TestLimits:
    """Test configured resource limits"""

    def test_max_cells(self):
        config = RuntimeConfig(max_cells=10)
        result, _ = run_bf('>' * 20, config=config)
        assert result.status is Status.ALLOCATION_ERROR
        assert isinstance(result.error, AllocationError)
        assert result.error.position == 9

    def test_max_steps(self):
        config = RuntimeConfig(max_steps=100)
        result, _ = run_bf('+[]', config=config)
        assert result.status is Status.STEP_LIMIT
        assert isinstance(result.error, StepLimitError)
        assert result.steps == 101

    def test_max_steps_exact(self):
        config = RuntimeConfig(max_steps=3)
        result, output = run_bf('++.', config=config)
        assert result.ok
        assert output == b'\x02'


class TestInterpreterState:
    """Test interpreter reuse and program normalization"""

    def test_rerun_starts_fresh(self):
        sink = BufferSink()
        interpreter = Interpreter('+.', sink=sink)
        interpreter.run()
        interpreter.run()
        assert sink.getvalue() == b'\x01\x01'

    def test_tape_inspection_after_run(self):
        interpreter = Interpreter('+>++>+++<')
        interpreter.run()
        assert interpreter.tape.position == 1
        assert interpreter.tape.snapshot() == bytes([1, 2, 3])

    def test_each_run_gets_a_fresh_tape(self):
        interpreter = Interpreter('+>+')
        interpreter.run()
        first = interpreter.tape
        interpreter.run()
        assert interpreter.tape is not first
        assert interpreter.tape.snapshot() == bytes([1, 1])

    def test_run_result_type(self):
        result = Interpreter('').run()
        assert isinstance(result, RunResult)
        assert result.error is None

    def test_as_program(self):
        assert as_program('+.') == b'+.'
        assert as_program(bytearray(b'+.')) == b'+.'
        with pytest.raises(BFError):
            as_program(42)

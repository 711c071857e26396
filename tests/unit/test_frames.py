"""Unit tests for device frame classification."""

import pytest

from watjai.protocol.frames import Frame, FrameKind, LineAssembler, classify_line, parse_frames


@pytest.mark.unit
class TestClassifyLine:
    """Test cases for classify_line."""

    @pytest.mark.parametrize("line, kind", [
        ("STATUS:READY", FrameKind.STATUS),
        ("STATUS:1,2,3", FrameKind.STATUS),
        ("BUFFER:FULL", FrameKind.BUFFER_FULL),
        ("DATA:START", FrameKind.DATA_START),
        ("DATA:END", FrameKind.DATA_END),
        ("  DATA:END\r", FrameKind.DATA_END),
    ])
    def test_control_lines(self, line, kind):
        frame = classify_line(line)
        assert frame.kind is kind
        assert frame.values == ()

    def test_sample_line(self):
        frame = classify_line("512, 530,-12 ,+7")
        assert frame.kind is FrameKind.SAMPLE_LINE
        assert frame.values == (512, 530, -12, 7)

    def test_single_sample(self):
        frame = classify_line(" 2048\r")
        assert frame == Frame(FrameKind.SINGLE_SAMPLE, (2048,), "2048")

    def test_sample_line_with_malformed_token_is_rejected(self):
        assert classify_line("1,abc,3") is None
        assert classify_line("1,2,") is None

    @pytest.mark.parametrize("line", ["", "   ", "hello", "12.5", "OK:START"])
    def test_unrecognised_lines_produce_no_frame(self, line):
        assert classify_line(line) is None


@pytest.mark.unit
class TestParseFrames:
    """Test cases for parse_frames and LineAssembler."""

    STREAM = "STATUS:OK\nDATA:START\n1,2,3\n4\n\ngarbage\nBUFFER:FULL\n5,6\nDATA:END\n"

    def test_frames_in_arrival_order(self):
        kinds = [frame.kind for frame in parse_frames(self.STREAM)]
        assert kinds == [
            FrameKind.STATUS,
            FrameKind.DATA_START,
            FrameKind.SAMPLE_LINE,
            FrameKind.SINGLE_SAMPLE,
            FrameKind.BUFFER_FULL,
            FrameKind.SAMPLE_LINE,
            FrameKind.DATA_END,
        ]

    def test_parse_is_lazy(self):
        frames = parse_frames("1\n2\n")
        assert next(frames).values == (1,)
        assert next(frames).values == (2,)
        with pytest.raises(StopIteration):
            next(frames)

    def test_final_segment_without_newline_is_a_line(self):
        frames = list(parse_frames("1,2\n3"))
        assert [frame.values for frame in frames] == [(1, 2), (3,)]

    @pytest.mark.parametrize("split_at", range(len(STREAM) + 1))
    def test_split_chunks_match_unsplit_parse(self, split_at):
        expected = list(parse_frames(self.STREAM))

        assembler = LineAssembler()
        frames = list(assembler.frames(self.STREAM[:split_at]))
        frames += list(assembler.frames(self.STREAM[split_at:]))

        assert frames == expected
        assert assembler.pending == ""

    def test_assembler_holds_partial_line(self):
        assembler = LineAssembler()
        assert assembler.feed("12,3") == []
        assert assembler.pending == "12,3"
        assert assembler.feed("4\n5") == ["12,34"]
        assert assembler.flush() == ["5"]
        assert assembler.flush() == []

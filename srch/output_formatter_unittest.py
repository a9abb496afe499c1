import io
import threading
import unittest

from rich.console import Console

from srch import output_formatter
from srch.pattern_matcher import PatternMatcher
from srch.search_result import ContextWindow, LineRole, RenderedLine, WindowBlock


def _block(lines, separated):
    window = ContextWindow(center_index=0, start_index=0, end_index=len(lines))
    return WindowBlock(window=window, lines=lines, separated=separated)


class TestPlainFormatter(unittest.TestCase):
    def setUp(self):
        self.formatter = output_formatter.OutputFormatter(interactive=False)
        self.matcher = PatternMatcher("hit")

    def test_decorations_are_identity(self):
        self.assertEqual(self.formatter.file_label("dir/[x].txt"), "dir/[x].txt")
        self.assertEqual(self.formatter.match_span("hit"), "hit")
        self.assertEqual(self.formatter.line_number(3, ":"), "")

    def test_line_has_no_number(self):
        line = RenderedLine(line_number=4, role=LineRole.MATCH, text="a hit\there")
        self.assertEqual(self.formatter.format_line(line, self.matcher), " a hit\there\n")

    def test_windows_with_separators(self):
        blocks = [
            _block([RenderedLine(1, LineRole.BEFORE, "a"), RenderedLine(2, LineRole.MATCH, "hit")], True),
            _block([RenderedLine(5, LineRole.MATCH, "hit")], True),
        ]
        self.assertEqual(self.formatter.format_windows(blocks, self.matcher), " a\n hit\n--\n hit\n--\n")

    def test_windows_without_separators(self):
        blocks = [_block([RenderedLine(2, LineRole.MATCH, "hit")], False)]
        self.assertEqual(self.formatter.format_windows(blocks, self.matcher), " hit\n")


class TestInteractiveFormatter(unittest.TestCase):
    def setUp(self):
        self.formatter = output_formatter.OutputFormatter(interactive=True)
        self.matcher = PatternMatcher("hit")

    def test_glyph_per_role(self):
        expected = {
            LineRole.BEFORE: "[bright_yellow]7-[/bright_yellow] x\n",
            LineRole.AFTER: "[bright_yellow]7+[/bright_yellow] x\n",
            LineRole.PLAIN: "[bright_yellow]7:[/bright_yellow] x\n",
        }
        for role, text in expected.items():
            self.assertEqual(self.formatter.format_line(RenderedLine(7, role, "x"), self.matcher), text)

    def test_match_line_highlighted_and_escaped(self):
        line = RenderedLine(2, LineRole.MATCH, "[b] hit")
        self.assertEqual(
            self.formatter.format_line(line, self.matcher),
            "[bright_yellow]2:[/bright_yellow] \\[b] [black on green]hit[/black on green]\n",
        )

    def test_context_line_not_highlighted(self):
        line = RenderedLine(1, LineRole.BEFORE, "hit")
        self.assertEqual(self.formatter.format_line(line, self.matcher), "[bright_yellow]1-[/bright_yellow] hit\n")

    def test_file_label(self):
        self.assertEqual(self.formatter.file_label("a.txt"), "[bright_cyan]a.txt[/bright_cyan]")

    def test_detect(self):
        terminal = Console(file=io.StringIO(), force_terminal=True)
        piped = Console(file=io.StringIO(), force_terminal=False)
        self.assertTrue(output_formatter.OutputFormatter.detect(terminal).interactive)
        self.assertFalse(output_formatter.OutputFormatter.detect(piped).interactive)


class TestOutputWriter(unittest.TestCase):
    def test_plain_output_is_verbatim(self):
        stream = io.StringIO()
        writer = output_formatter.OutputWriter(output_formatter.OutputFormatter(False), stream=stream)
        writer.write("file [x]\n\tindented\n")
        self.assertEqual(stream.getvalue(), "file [x]\n\tindented\n\n")

    def test_interactive_output_renders_markup(self):
        stream = io.StringIO()
        console = Console(file=stream, force_terminal=True, color_system="standard", width=200)
        writer = output_formatter.OutputWriter(output_formatter.OutputFormatter(True), console=console)
        writer.write("[bright_cyan]a.txt[/bright_cyan]")
        output = stream.getvalue()
        self.assertIn("a.txt", output)
        self.assertIn("\x1b[", output)
        self.assertNotIn("[bright_cyan]", output)

    def test_concurrent_messages_do_not_interleave(self):
        stream = io.StringIO()
        writer = output_formatter.OutputWriter(output_formatter.OutputFormatter(False), stream=stream)
        messages = ["".join(f"{n}-{i}\n" for i in range(50)) for n in range(20)]
        threads = [threading.Thread(target=writer.write, args=(m,)) for m in messages]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        chunks = [chunk for chunk in stream.getvalue().split("\n\n") if chunk]
        self.assertEqual(sorted(chunks), sorted(m.rstrip("\n") for m in messages))


if __name__ == '__main__':
    unittest.main()

"""Unit tests for console prompts."""

from io import StringIO

from s3viewer.prompt import ConsolePrompter


def make_prompter(text: str) -> tuple[ConsolePrompter, StringIO]:
    out = StringIO()
    return ConsolePrompter(stdin=StringIO(text), stdout=out), out


class TestPick:
    def test_by_number(self) -> None:
        prompter, out = make_prompter("2\n")
        assert prompter.pick(["a", "b"], "Select an S3 bucket") == "b"
        assert "Select an S3 bucket:" in out.getvalue()
        assert "1) a" in out.getvalue()

    def test_by_name(self) -> None:
        prompter, _ = make_prompter("a\n")
        assert prompter.pick(["a", "b"], "Select") == "a"

    def test_invalid_then_valid(self) -> None:
        prompter, out = make_prompter("7\n1\n")
        assert prompter.pick(["a", "b"], "Select") == "a"
        assert "Invalid choice: 7" in out.getvalue()

    def test_empty_input_cancels(self) -> None:
        prompter, _ = make_prompter("\n")
        assert prompter.pick(["a"], "Select") is None

    def test_eof_cancels(self) -> None:
        prompter, _ = make_prompter("")
        assert prompter.pick(["a"], "Select") is None

    def test_no_options(self) -> None:
        prompter, out = make_prompter("1\n")
        assert prompter.pick([], "Select") is None
        assert "Nothing to select." in out.getvalue()


class TestAsk:
    def test_answer(self) -> None:
        prompter, _ = make_prompter("  s3://b/k.csv \n")
        assert prompter.ask("S3 URL") == "s3://b/k.csv"

    def test_blank_is_cancel(self) -> None:
        prompter, _ = make_prompter("   \n")
        assert prompter.ask("S3 URL") is None

"""Tests for the entry and add commands."""

from unittest.mock import patch

from bibadd.api.crossref import EntryStub
from bibadd.core.bibtex import BibtexFormat
from bibadd.core.collection import Collection
from bibadd.exceptions import BibaddError, ErrorKind


class TestCheckCommand:
    """Test the check command."""

    def test_complete_bibliography(self, cli_runner, bib_file):
        """Test a complete file passes and is left untouched."""
        before = bib_file.read_text()

        result = cli_runner.invoke(["check"])

        assert result.exit_code == 0
        assert "All entries contain the required fields!" in result.output
        assert bib_file.read_text() == before

    def test_missing_fields_listed(self, cli_runner, workdir):
        """Test missing fields are reported with the interact hint."""
        (workdir / "refs.bib").write_text("@article{a, title = {Alone}}")

        result = cli_runner.invoke(["check"])

        assert result.exit_code == 1
        assert "missing required fields in article entry" in result.output
        assert "--interact" in result.output

    def test_interactive_completion_saved(
        self, cli_runner, workdir, answers, read_bib
    ):
        """Test fields entered interactively are written back."""
        path = workdir / "refs.bib"
        path.write_text("@manual{m, author = {A}}")
        prompts = answers("The Manual")

        result = cli_runner.invoke(["-i", "check"])

        assert result.exit_code == 0
        assert prompts == ["Enter value for the title field"]
        assert read_bib(path).get("m").title == "The Manual"

    def test_invalid_file(self, cli_runner, workdir):
        """Test unparsable files are reported."""
        (workdir / "refs.bib").write_text("@article{a, title = }")

        result = cli_runner.invoke(["check"])

        assert result.exit_code == 1
        assert "Unable to parse string as BibTeX" in result.output

    def test_creates_default_file(self, cli_runner, workdir):
        """Test a default bibliography is created when none exists."""
        result = cli_runner.invoke(["check"])

        assert result.exit_code == 0
        assert (workdir / "bibliography.bib").exists()


class TestRmCommand:
    """Test the rm command."""

    def test_remove_entry(self, cli_runner, bib_file, read_bib):
        """Test the entry is removed and the file rewritten."""
        result = cli_runner.invoke(["rm", "KNUTH1984"])

        assert result.exit_code == 0
        assert "Entry removed from bibliography" in result.output
        assert len(read_bib(bib_file)) == 0

    def test_remove_unknown(self, cli_runner, bib_file):
        """Test unknown keys leave the file alone."""
        before = bib_file.read_text()

        result = cli_runner.invoke(["rm", "nobody"])

        assert result.exit_code == 0
        assert "No entry found with the cite key of 'nobody'" in result.output
        assert bib_file.read_text() == before


class TestNewCommand:
    """Test the new command."""

    def test_prompts_for_required_fields(self, cli_runner, bib_file, answers, read_bib):
        """Test every required field is asked for in catalog order."""
        prompts = answers("Ada Lovelace", "Notes", "1843", "Extra")

        result = cli_runner.invoke(
            ["new", "unpublished", "--fields", "year,note"]
        )

        assert result.exit_code == 0
        assert prompts == [
            "Enter value for the author field",
            "Enter value for the title field",
            "Enter value for the year field",
            "Enter value for the note field",
        ]
        entry = read_bib(bib_file).get("AdaLovelace1843")
        assert entry.get_field("note") == "Extra"
        assert "AdaLovelace1843" in result.output

    def test_explicit_cite_and_other_kind(
        self, cli_runner, bib_file, answers, read_bib
    ):
        """Test unknown kinds only need a title."""
        answers("My Tool")

        result = cli_runner.invoke(["new", "software", "--cite", "tool"])

        assert result.exit_code == 0
        entry = read_bib(bib_file).get("tool")
        assert entry.kind.name == "software"
        assert "@software{tool," in bib_file.read_text()


class TestDeriveCommand:
    """Test the derive command."""

    def test_derive_chapter_from_book(self, cli_runner, bib_file, answers, read_bib):
        """Test fields are copied and only the missing ones asked for."""
        prompts = answers("7")

        result = cli_runner.invoke(
            ["derive", "knuth1984", "book chapter", "knuth1984ch7"]
        )

        assert result.exit_code == 0
        assert prompts == ["Enter value for the chapter field"]
        collection = read_bib(bib_file)
        chapter = collection.get("knuth1984ch7")
        assert chapter.get_field("publisher") == "Addison-Wesley"
        assert chapter.get_field("chapter") == "7"
        assert "knuth1984" in collection
        assert "@inbook{knuth1984ch7," in bib_file.read_text()

    def test_derive_unknown_source(self, cli_runner, bib_file):
        """Test deriving from a missing entry fails."""
        result = cli_runner.invoke(["derive", "nobody", "book", "x"])

        assert result.exit_code == 1
        assert "No entry found with the cite key of 'nobody'" in result.output


class TestAddCommands:
    """Test adding entries from lookup services."""

    def test_add_doi(self, cli_runner, bib_file, article_bibtex, read_bib):
        """Test the looked up entry is added."""
        found = BibtexFormat.parse(article_bibtex)

        with patch(
            "bibadd.cli.commands.add.entries_by_doi", return_value=found
        ) as lookup:
            result = cli_runner.invoke(["add", "doi", "10.1145/359545.359563"])

        assert result.exit_code == 0
        assert lookup.call_args.args[0] == "10.1145/359545.359563"
        assert "Lamport_1978" in result.output
        collection = read_bib(bib_file)
        assert {e.cite() for e in collection} == {"knuth1984", "Lamport_1978"}

    def test_add_duplicate_isbn(self, cli_runner, bib_file):
        """Test ISBNs already present are refused before any lookup."""
        with patch("bibadd.cli.commands.add.entries_by_isbn") as lookup:
            result = cli_runner.invoke(["add", "isbn", "0-201-13447-0"])

        assert result.exit_code == 1
        assert "An entry already exists with a isbn field" in result.output
        lookup.assert_not_called()

    def test_incomplete_result_needs_interact(self, cli_runner, bib_file):
        """Test incomplete results are reported when not interactive."""
        found = BibtexFormat.parse("@article{partial, title = {Partial}}")

        with patch("bibadd.cli.commands.add.entries_by_url", return_value=found):
            result = cli_runner.invoke(["add", "url", "https://example.org/x.bib"])

        assert result.exit_code == 1
        assert "missing required fields in article entry" in result.output
        assert "--interact" in result.output

    def test_incomplete_result_completed_interactively(
        self, cli_runner, bib_file, answers, read_bib
    ):
        """Test missing fields are prompted for in interact mode."""
        found = BibtexFormat.parse("@manual{partial, author = {A}}")
        answers("Filled In")

        with patch("bibadd.cli.commands.add.entries_by_rfc", return_value=found):
            result = cli_runner.invoke(["-i", "add", "rfc", "2616"])

        assert result.exit_code == 0
        assert read_bib(bib_file).get("partial").title == "Filled In"

    def test_interactive_selection(self, cli_runner, bib_file, answers, read_bib):
        """Test the chosen item of a multi-entry result is added."""
        found = BibtexFormat.parse(
            "@manual{first, title = {First}}\n@manual{second, title = {Second}}"
        )
        prompts = answers("2")

        with patch("bibadd.cli.commands.add.entries_by_url", return_value=found):
            result = cli_runner.invoke(["-i", "add", "url", "https://example.org/"])

        assert result.exit_code == 0
        assert prompts == ["Choose an entry"]
        collection = read_bib(bib_file)
        assert "second" in collection
        assert "first" not in collection

    def test_non_interactive_takes_first(self, cli_runner, bib_file, read_bib):
        """Test the first entry is added without asking."""
        found = BibtexFormat.parse(
            "@manual{first, title = {First}}\n@manual{second, title = {Second}}"
        )

        with patch("bibadd.cli.commands.add.entries_by_url", return_value=found):
            result = cli_runner.invoke(["add", "url", "https://example.org/"])

        assert result.exit_code == 0
        assert "first" in read_bib(bib_file)

    def test_add_title(self, cli_runner, bib_file, article_bibtex, read_bib):
        """Test title searches add the first hit's DOI."""
        stubs = [
            EntryStub("10.1145/359545.359563", ["Time, clocks"]),
            EntryStub("10.1/other", ["Other"]),
        ]
        found = BibtexFormat.parse(article_bibtex)

        with (
            patch(
                "bibadd.cli.commands.add.entry_stubs_by_title", return_value=stubs
            ),
            patch(
                "bibadd.cli.commands.add.entries_by_doi", return_value=found
            ) as lookup,
        ):
            result = cli_runner.invoke(["add", "title", "Time, clocks"])

        assert result.exit_code == 0
        assert lookup.call_args.args[0] == "10.1145/359545.359563"
        assert "Lamport_1978" in read_bib(bib_file)

    def test_lookup_failure_reported(self, cli_runner, bib_file):
        """Test service errors are printed and nothing is written."""
        before = bib_file.read_text()
        error = BibaddError(ErrorKind.NO_VALUE, "No books found!")

        with patch("bibadd.cli.commands.add.entries_by_isbn", side_effect=error):
            result = cli_runner.invoke(["add", "isbn", "123"])

        assert result.exit_code == 1
        assert "No value error: No books found!" in result.output
        assert bib_file.read_text() == before

    def test_empty_result(self, cli_runner, bib_file):
        """Test results without entries are reported."""
        with patch(
            "bibadd.cli.commands.add.entries_by_url", return_value=Collection()
        ):
            result = cli_runner.invoke(["add", "url", "https://example.org/"])

        assert result.exit_code == 1
        assert "Request did not find any results" in result.output

    def test_invalid_file_checked_before_lookup(self, cli_runner, workdir):
        """Test a broken bibliography stops the command before any request."""
        (workdir / "refs.bib").write_text("@article{a, title = }")

        with patch("bibadd.cli.commands.add.entries_by_rfc") as lookup:
            result = cli_runner.invoke(["add", "rfc", "2616"])

        assert result.exit_code == 1
        assert "Unable to parse string as BibTeX" in result.output
        lookup.assert_not_called()

"""End-to-end tests of the dispatcher against a Whoosh fixture index."""

import io
import json
import shlex
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))
sys.path.insert(0, str(REPO_ROOT / "test"))

from index_fixture import build_extra_index, build_index

from IndexQueryTool.core.catalog import FieldCatalog
from IndexQueryTool.core.errors import ConfigurationError, DataAccessError, InvalidFieldNames, QuerySyntaxError
from IndexQueryTool.core.settings import RunConfiguration
from IndexQueryTool.index import WhooshIndex
from IndexQueryTool.services import QueryDispatcher


class _FixtureIndexCase(unittest.TestCase):
    segments = 1
    with_extra_index = False

    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = tempfile.TemporaryDirectory()
        cls.index_paths = [build_index(Path(cls._tmp.name) / "index", segments=cls.segments)]
        if cls.with_extra_index:
            cls.index_paths.append(build_extra_index(Path(cls._tmp.name) / "extra"))

    @classmethod
    def tearDownClass(cls) -> None:
        cls._tmp.cleanup()

    def setUp(self) -> None:
        self.index = WhooshIndex.open_all(self.index_paths)
        self.addCleanup(self.index.close)
        self.config = RunConfiguration(FieldCatalog.from_index(self.index))

    def run_query(self, *tokens: str) -> str:
        out = io.StringIO()
        QueryDispatcher(self.index, self.config, out).run(list(tokens))
        return out.getvalue()

    def output_lines(self, *tokens: str) -> list[str]:
        return [line for line in self.run_query(*tokens).splitlines() if line]


class TestQueries(_FixtureIndexCase):
    def test_query_all(self) -> None:
        lines = self.output_lines("%all")
        self.assertIn("longest-mention: Bill Clinton", lines)
        self.assertIn("longest-mention: George W. Bush", lines)
        self.assertIn("longest-mention: George H. W. Bush", lines)

    def test_query_stored_string_field(self) -> None:
        lines = self.output_lines("longest-mention:'Bill Clinton'")
        self.assertEqual(lines, ["longest-mention: Bill Clinton"])

    def test_query_stored_string_field_wrong_case(self) -> None:
        self.assertEqual(self.output_lines("longest-mention:'bill clinton'"), [])

    def test_query_analyzed_field(self) -> None:
        lines = self.output_lines("context:bush")
        self.assertEqual(len(lines), 2)
        self.assertIn("longest-mention: George W. Bush", lines)
        self.assertIn("longest-mention: George H. W. Bush", lines)

    def test_free_query_tokens_are_joined(self) -> None:
        lines = self.output_lines("context:bush", "OR", "context:arkansas")
        self.assertEqual(len(lines), 3)

    def test_keyword_analyzer_preserves_case(self) -> None:
        self.assertEqual(self.output_lines("context:BUSH"), [])

    def test_standard_analyzer_lowercases(self) -> None:
        self.config.set_analyzer("Standard")
        self.assertEqual(len(self.output_lines("context:BUSH")), 2)

    def test_default_field(self) -> None:
        self.config.set_default_field("context")
        lines = self.output_lines("bush")
        self.assertEqual(len(lines), 2)
        self.assertIn("longest-mention: George W. Bush", lines)
        self.assertIn("longest-mention: George H. W. Bush", lines)

    def test_query_without_field_requires_default_field(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "no ':' and no query-field defined"):
            self.run_query("bush")

    def test_query_stored_only_field_matches_nothing(self) -> None:
        self.assertEqual(self.run_query("zzz:foo"), "")

    def test_stored_only_default_field_matches_nothing(self) -> None:
        self.config.set_default_field("zzz")
        self.config.set_show_hits(True)
        self.assertEqual(self.output_lines("foo"), ["totalHits: 0"])

    def test_trailing_operator_is_syntax_error(self) -> None:
        with self.assertRaisesRegex(QuerySyntaxError, "outside any field clause"):
            self.run_query("context:bush AND")

    def test_query_with_unknown_fields(self) -> None:
        with self.assertRaises(InvalidFieldNames) as ctx:
            self.run_query("nosuch:foo OR other:bar OR context:bush")
        self.assertCountEqual(ctx.exception.names, ["nosuch", "other"])

    def test_query_limit(self) -> None:
        self.config.set_show_hits(True)
        self.config.set_query_limit(1)
        lines = self.output_lines("context:bush")
        self.assertEqual(len(lines), 2)
        self.assertEqual(lines[0], "totalHits: 2")
        self.assertIn(lines[1], ("longest-mention: George W. Bush", "longest-mention: George H. W. Bush"))

    def test_query_limit_zero_is_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            self.config.set_query_limit(0)

    def test_output_limit(self) -> None:
        self.config.set_output_limit(1)
        self.config.set_show_id(True)
        self.config.set_regex("aaa", "foo")
        lines = self.output_lines("%all")
        self.assertEqual(lines[0], "<id>: 3")
        self.assertCountEqual(lines[1:], ["aaa: foo", "bbb: foo", "bbb: bar", "zzz: foo"])

    def test_output_limit_caps_documents(self) -> None:
        self.config.set_output_limit(2)
        lines = self.output_lines("%all")
        self.assertEqual(sum(1 for line in lines if line.startswith("longest-mention:")), 2)

    def test_output_limit_zero_prints_nothing(self) -> None:
        self.config.set_output_limit(0)
        self.assertEqual(self.run_query("%all"), "")

    def test_show_hits_precedes_documents_with_blank_line(self) -> None:
        self.config.set_show_hits(True)
        text = self.run_query("longest-mention:'Bill Clinton'")
        self.assertEqual(text, "totalHits: 1\n\nlongest-mention: Bill Clinton\n")

    def test_show_id(self) -> None:
        self.config.set_show_id(True)
        self.assertTrue(any(line.startswith("<id>:") for line in self.output_lines("%all")))

    def test_show_score(self) -> None:
        self.config.set_show_score(True)
        self.assertTrue(any(line.startswith("<score>:") for line in self.output_lines("%all")))

    def test_regex_filter(self) -> None:
        self.config.set_regex("longest-mention", ".*Clint.*")
        self.assertEqual(self.output_lines("%all"), ["longest-mention: Bill Clinton"])

    def test_regex_filter_requires_full_match(self) -> None:
        self.config.set_regex("longest-mention", "Clint")
        self.assertEqual(self.output_lines("%all"), [])

    def test_query_regex_is_case_sensitive_on_unanalyzed_field(self) -> None:
        lines = self.output_lines('longest-mention:r"Bill C.*"')
        self.assertEqual(lines, ["longest-mention: Bill Clinton"])

    def test_configuration_frozen_after_run(self) -> None:
        self.run_query("%enumerate-fields")
        with self.assertRaises(ConfigurationError):
            self.config.set_show_id(True)


class TestIds(_FixtureIndexCase):
    def test_query_ids(self) -> None:
        self.config.set_show_id(True)
        lines = self.output_lines("%ids", "0", "1", "2")
        self.assertIn("<id>: 0", lines)
        self.assertIn("<id>: 1", lines)
        self.assertIn("<id>: 2", lines)

    def test_ids_have_fixed_score(self) -> None:
        self.config.set_show_score(True)
        self.config.set_field_names(["aaa"])
        self.assertEqual(self.output_lines("%ids", "3"), ["<score>: 1.0", "aaa: foo"])

    def test_sort_fields(self) -> None:
        self.config.set_sort_fields(True)
        lines = self.output_lines("%ids", "3")
        self.assertEqual(lines[:3], ["aaa: foo", "bbb: bar", "bbb: foo"])

    def test_fields(self) -> None:
        self.config.set_field_names(["bbb"])
        lines = self.output_lines("%ids", "3")
        self.assertEqual(len(lines), 2)
        self.assertIn("bbb: foo", lines)
        self.assertIn("bbb: bar", lines)

    def test_missing_selected_field_prints_null(self) -> None:
        self.config.set_field_names(["longest-mention", "aaa"])
        self.assertEqual(self.output_lines("%ids", "0"), ["longest-mention: Bill Clinton", "aaa: null"])

    def test_id_file(self) -> None:
        self.config.set_show_id(True)
        self.config.set_field_names(["longest-mention"])
        with tempfile.TemporaryDirectory() as tmp:
            id_file = Path(tmp) / "ids.txt"
            id_file.write_text("0 1\n\n2\n", encoding="utf-8")
            lines = self.output_lines("%id-file", str(id_file))
        self.assertEqual([line for line in lines if line.startswith("<id>")], ["<id>: 0", "<id>: 1", "<id>: 2"])

    def test_id_file_missing(self) -> None:
        with self.assertRaises(DataAccessError):
            self.run_query("%id-file", "/nonexistent/ids.txt")

    def test_id_out_of_range(self) -> None:
        with self.assertRaises(DataAccessError):
            self.run_query("%ids", "42")

    def test_malformed_id(self) -> None:
        with self.assertRaises(DataAccessError):
            self.run_query("%ids", "x1")


class TestFormats(_FixtureIndexCase):
    def test_tabular(self) -> None:
        self.config.set_field_names(["longest-mention"])
        self.config.set_tabular(True)
        self.assertEqual(self.output_lines("%ids", "0"), ["longest-mention", "Bill Clinton"])

    def test_tabular_header_printed_once(self) -> None:
        self.config.set_field_names(["longest-mention", "aaa"])
        self.config.set_tabular(True)
        text = self.run_query("%ids", "0", "1")
        self.assertEqual(text, "longest-mention\taaa\nBill Clinton\tnull\nGeorge W. Bush\tnull\n")

    def test_suppress_names(self) -> None:
        self.config.set_field_names(["longest-mention"])
        self.config.set_tabular(True)
        self.config.set_suppress_names(True)
        self.assertEqual(self.output_lines("%ids", "0"), ["Bill Clinton"])

    def test_tabular_requires_fields(self) -> None:
        self.config.set_tabular(True)
        with self.assertRaisesRegex(ConfigurationError, "--tabular requires --fields"):
            self.run_query("%all")

    def test_tabular_multivalued(self) -> None:
        self.config.set_field_names(["bbb"])
        self.config.set_tabular(True)
        with self.assertRaisesRegex(ConfigurationError, "Multivalued field 'bbb'"):
            self.run_query("%ids", "3")

    def test_multiline_multivalued(self) -> None:
        self.config.set_field_names(["bbb"])
        self.assertEqual(self.output_lines("%ids", "3"), ["bbb: foo", "bbb: bar"])

    def test_json(self) -> None:
        self.config.set_field_names(["bbb", "aaa", "longest-mention"])
        self.config.set_output_format("json")
        lines = self.run_query("%ids", "3").splitlines()
        self.assertEqual(len(lines), 1)
        self.assertEqual(json.loads(lines[0]), {"bbb": ["foo", "bar"], "aaa": "foo", "longest-mention": "null"})

    def test_json_pretty_separates_documents(self) -> None:
        self.config.set_field_names(["longest-mention"])
        self.config.set_output_format("json-pretty")
        text = self.run_query("%ids", "0", "1")
        first, second = text.split("\n\n")
        self.assertEqual(json.loads(first), {"longest-mention": "Bill Clinton"})
        self.assertEqual(json.loads(second), {"longest-mention": "George W. Bush"})


class TestEnumeration(_FixtureIndexCase):
    def test_enumerate_fields(self) -> None:
        self.assertEqual(
            self.output_lines("%enumerate-fields"),
            ["aaa", "bbb", "context", "longest-mention", "zzz"],
        )

    def test_count_fields(self) -> None:
        self.assertEqual(
            self.output_lines("%count-fields"),
            ["aaa: 1", "bbb: 1", "context: 3", "longest-mention: 3", "zzz: 0"],
        )

    def test_enumerate_terms(self) -> None:
        self.assertEqual(
            self.output_lines("%enumerate-terms", "context"),
            [
                "arkansas (1)",
                "barbara (1)",
                "bush (2)",
                "clinton (1)",
                "hillary (1)",
                "laura (1)",
                "texas (2)",
            ],
        )

    def test_enumerate_terms_multivalued(self) -> None:
        self.assertEqual(self.output_lines("%enumerate-terms", "bbb"), ["bar (1)", "foo (1)"])

    def test_enumerate_terms_unindexed_field(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "Unindexed field: zzz"):
            self.run_query("%enumerate-terms", "zzz")

    def test_enumerate_terms_unknown_field(self) -> None:
        with self.assertRaises(InvalidFieldNames):
            self.run_query("%enumerate-terms", "nosuch")

    def test_enumerate_terms_requires_one_field(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "%enumerate-terms requires exactly one field."):
            self.run_query("%enumerate-terms")


class TestMultiSegmentIndex(_FixtureIndexCase):
    segments = 2

    def test_index_has_several_segments(self) -> None:
        self.assertEqual(len(self.index.segments()), 2)

    def test_enumerate_terms_merges_segments(self) -> None:
        lines = self.output_lines("%enumerate-terms", "context")
        self.assertEqual(lines, sorted(lines))
        self.assertIn("bush (2)", lines)
        self.assertIn("texas (2)", lines)
        self.assertEqual(len(lines), 7)

    def test_count_fields_sums_segments(self) -> None:
        self.assertEqual(
            self.output_lines("%count-fields"),
            ["aaa: 1", "bbb: 1", "context: 3", "longest-mention: 3", "zzz: 0"],
        )

    def test_ids_use_global_document_numbers(self) -> None:
        self.config.set_sort_fields(True)
        self.assertEqual(self.output_lines("%ids", "3")[:3], ["aaa: foo", "bbb: bar", "bbb: foo"])


class TestSeveralIndexes(_FixtureIndexCase):
    with_extra_index = True

    def test_catalog_is_union_of_schemas(self) -> None:
        self.assertEqual(
            self.output_lines("%enumerate-fields"),
            ["aaa", "bbb", "context", "longest-mention", "yyy", "zzz"],
        )

    def test_ids_continue_into_second_index(self) -> None:
        self.config.set_field_names(["longest-mention", "yyy"])
        self.assertEqual(self.output_lines("%ids", "4"), ["longest-mention: Barack Obama", "yyy: bar"])
        with self.assertRaises(DataAccessError):
            self.run_query("%ids", "5")

    def test_query_spans_indexes(self) -> None:
        lines = self.output_lines("context:bush")
        self.assertCountEqual(
            lines,
            ["longest-mention: George W. Bush", "longest-mention: George H. W. Bush", "longest-mention: Barack Obama"],
        )

    def test_query_field_of_second_index(self) -> None:
        self.assertCountEqual(self.output_lines("yyy:bar"), ["longest-mention: Barack Obama", "yyy: bar"])

    def test_count_fields_spans_indexes(self) -> None:
        self.assertEqual(
            self.output_lines("%count-fields"),
            ["aaa: 1", "bbb: 1", "context: 4", "longest-mention: 4", "yyy: 1", "zzz: 0"],
        )

    def test_enumerate_terms_merges_indexes(self) -> None:
        lines = self.output_lines("%enumerate-terms", "context")
        self.assertEqual(len(lines), 10)
        self.assertIn("bush (3)", lines)
        self.assertIn("obama (1)", lines)
        self.assertEqual(lines, sorted(lines))

    def test_open_requires_a_path(self) -> None:
        with self.assertRaises(DataAccessError):
            WhooshIndex.open_all([])


class TestScript(_FixtureIndexCase):
    def test_script(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out1 = Path(tmp) / "out1"
            out2 = Path(tmp) / "out2"
            script = Path(tmp) / "script.txt"
            script.write_text(
                f"-q context:bush -o {shlex.quote(str(out1))}\n\n-q context:clinton -o {shlex.quote(str(out2))}\n",
                encoding="utf-8",
            )
            self.assertEqual(self.run_query("%script", str(script)), "")
            self.assertIn("George", out1.read_text(encoding="utf-8"))
            self.assertIn("Bill", out2.read_text(encoding="utf-8"))

    def test_script_default_sink_and_quoting(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            script = Path(tmp) / "script.txt"
            script.write_text("--query \"longest-mention:'Bill Clinton'\"\n", encoding="utf-8")
            lines = self.output_lines("%script", str(script))
        self.assertEqual(lines, ["longest-mention: Bill Clinton"])

    def test_script_each_line_has_fresh_output_limit(self) -> None:
        self.config.set_output_limit(1)
        with tempfile.TemporaryDirectory() as tmp:
            script = Path(tmp) / "script.txt"
            script.write_text("-q context:bush\n-q context:clinton\n", encoding="utf-8")
            lines = self.output_lines("%script", str(script))
        self.assertEqual(len(lines), 2)
        self.assertEqual(lines[1], "longest-mention: Bill Clinton")


if __name__ == "__main__":
    unittest.main()

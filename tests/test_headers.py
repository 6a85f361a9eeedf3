from __future__ import annotations

import unittest

from partsplit.headers import (
    Headers,
    is_valid_header_name,
    is_valid_header_value,
    parse_header_block,
    parse_options_header,
)


class TestHeaders(unittest.TestCase):
    def setUp(self) -> None:
        self.h = Headers()
        self.h["Content-Type"] = "text/plain"
        self.h["Content-ID"] = "response-1"

    def test_case_insensitive_lookup(self) -> None:
        self.assertEqual(self.h["content-type"], "text/plain")
        self.assertEqual(self.h["CONTENT-ID"], "response-1")
        self.assertIn("content-id", self.h)
        self.assertNotIn("Vary", self.h)
        self.assertNotIn(1, self.h)
        self.assertIsNone(self.h.get("vary"))

    def test_last_write_wins(self) -> None:
        self.h["content-type"] = "application/json"
        self.assertEqual(len(self.h), 2)
        self.assertEqual(self.h.raw, [("content-type", "application/json"), ("Content-ID", "response-1")])

    def test_order(self) -> None:
        self.h["Vary"] = "Origin"
        self.assertEqual(list(self.h), ["Content-Type", "Content-ID", "Vary"])

    def test_delete(self) -> None:
        del self.h["CONTENT-TYPE"]
        self.assertEqual(list(self.h), ["Content-ID"])
        with self.assertRaises(KeyError):
            del self.h["Content-Type"]

    def test_equality(self) -> None:
        self.assertEqual(self.h, {"content-type": "text/plain", "content-id": "response-1"})
        self.assertEqual(self.h, self.h.copy())
        self.assertNotEqual(self.h, {"content-type": "text/plain"})
        self.assertFalse(self.h == "text/plain")

    def test_init_from_pairs(self) -> None:
        h = Headers([("A", "1"), ("a", "2")])
        self.assertEqual(h.raw, [("a", "2")])

    def test_repr(self) -> None:
        self.assertEqual(
            repr(self.h),
            "Headers([('Content-Type', 'text/plain'), ('Content-ID', 'response-1')])",
        )


class TestHeaderValidation(unittest.TestCase):
    def test_names(self) -> None:
        self.assertTrue(is_valid_header_name("Content-Type"))
        self.assertTrue(is_valid_header_name("X-Custom_Header.1!"))
        self.assertFalse(is_valid_header_name(""))
        self.assertFalse(is_valid_header_name("Bad Name"))
        self.assertFalse(is_valid_header_name("Bad(Name)"))
        self.assertFalse(is_valid_header_name("caf\xe9"))

    def test_values(self) -> None:
        self.assertTrue(is_valid_header_value(""))
        self.assertTrue(is_valid_header_value("multipart/mixed; boundary=abc"))
        self.assertTrue(is_valid_header_value("a\tb"))
        self.assertFalse(is_valid_header_value("a\x00b"))
        self.assertFalse(is_valid_header_value("a\x7fb"))
        self.assertFalse(is_valid_header_value("caf\xe9"))


class TestParseHeaderBlock(unittest.TestCase):
    def test_simple(self) -> None:
        h = parse_header_block(b"\r\nContent-Type: application/json\r\nContent-ID: response-1")
        self.assertEqual(h.raw, [("Content-Type", "application/json"), ("Content-ID", "response-1")])

    def test_empty(self) -> None:
        self.assertEqual(len(parse_header_block(b"")), 0)
        self.assertEqual(len(parse_header_block(b"\r\n  \r\n")), 0)

    def test_value_whitespace_trimmed(self) -> None:
        h = parse_header_block(b"A:   spaced out \t\r\nB:")
        self.assertEqual(h["A"], "spaced out")
        self.assertEqual(h["B"], "")

    def test_split_at_first_colon(self) -> None:
        h = parse_header_block(b"Location: http://example.com:8080/")
        self.assertEqual(h["Location"], "http://example.com:8080/")

    def test_line_without_colon_dropped(self) -> None:
        h = parse_header_block(b"A: 1\r\nno colon here\r\nB: 2")
        self.assertEqual(h.raw, [("A", "1"), ("B", "2")])

    def test_bad_name_dropped(self) -> None:
        h = parse_header_block(b"Bad Name: x\r\n: empty\r\n\tTabbed: x\r\nOk: y")
        self.assertEqual(h.raw, [("Ok", "y")])

    def test_bad_value_dropped(self) -> None:
        h = parse_header_block("A: caf\xe9\r\nB: \x01\r\nC: ok".encode("utf-8"))
        self.assertEqual(h.raw, [("C", "ok")])

    def test_duplicates(self) -> None:
        h = parse_header_block(b"Vary: Origin\r\nVary: X-Origin\r\nvary: Referer")
        self.assertEqual(h.raw, [("vary", "Referer")])

    def test_bare_lf(self) -> None:
        h = parse_header_block(b"A: 1\nB: 2\n")
        self.assertEqual(h.raw, [("A", "1"), ("B", "2")])

    def test_invalid_utf8(self) -> None:
        self.assertEqual(len(parse_header_block(b"A: 1\r\nB: \xff\xfe")), 0)


class TestParseOptionsHeader(unittest.TestCase):
    def test_simple(self) -> None:
        t, p = parse_options_header("application/json")
        self.assertEqual(t, "application/json")
        self.assertEqual(p, {})

    def test_blank(self) -> None:
        t, p = parse_options_header("")
        self.assertEqual(t, "")
        self.assertEqual(p, {})

        self.assertEqual(parse_options_header(None), ("", {}))

    def test_bytes(self) -> None:
        t, p = parse_options_header(b"multipart/mixed; boundary=batch_1")
        self.assertEqual(t, "multipart/mixed")
        self.assertEqual(p["boundary"], "batch_1")

    def test_single_param_with_spaces(self) -> None:
        t, p = parse_options_header("application/json ;     param=value")
        self.assertEqual(t, "application/json")
        self.assertEqual(p, {"param": "value"})

    def test_multiple_params(self) -> None:
        t, p = parse_options_header("multipart/mixed; boundary=abc; charset=utf-8")
        self.assertEqual(p, {"boundary": "abc", "charset": "utf-8"})

    def test_quoted_param(self) -> None:
        t, p = parse_options_header('multipart/mixed; boundary="a b;c"')
        self.assertEqual(p["boundary"], "a b;c")

    def test_quoted_param_with_escapes(self) -> None:
        t, p = parse_options_header(r'attachment; filename="My \"Cool\" File.txt"')
        self.assertEqual(p["filename"], 'My "Cool" File.txt')

    def test_case_insensitive(self) -> None:
        t, p = parse_options_header("MULTIPART/MIXED; BOUNDARY=abc")
        self.assertEqual(t, "multipart/mixed")
        self.assertEqual(p["boundary"], "abc")

    def test_handles_rfc_2231(self) -> None:
        t, p = parse_options_header("text/plain; param*=us-ascii'en-us'encoded%20message")
        self.assertEqual(p["param"], "encoded message")

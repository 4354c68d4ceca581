"""
The parsers only depend on the Node protocol. These tests drive them with
hand-built trees (no HTML at all) and check the BeautifulSoup-backed Node.
"""

import unittest
from typing import Dict, Iterable, List, Optional

from coursesearch.document import load_document
from coursesearch.parse import discover_subjects_from_document, extract_courses_from_document


class FakeNode:
    """
    Synthetic tree node: selector results are given up front.
    """

    def __init__(
        self,
        text: str = "",
        attrs: Optional[Dict[str, str]] = None,
        classes: Iterable[str] = (),
        selections: Optional[Dict[str, List["FakeNode"]]] = None,
        matches: Iterable[str] = (),
        siblings: Optional[List["FakeNode"]] = None,
    ) -> None:
        self._text = text
        self._attrs = attrs or {}
        self._classes = set(classes)
        self._selections = selections or {}
        self._matches = set(matches)
        self._siblings = siblings or []

    def select(self, selector: str) -> List["FakeNode"]:
        return list(self._selections.get(selector, []))

    def select_one(self, selector: str) -> Optional["FakeNode"]:
        found = self.select(selector)
        return found[0] if found else None

    def attr(self, name: str) -> Optional[str]:
        return self._attrs.get(name)

    def text(self) -> str:
        return self._text

    def has_class(self, name: str) -> bool:
        return name in self._classes

    def matches(self, selector: str) -> bool:
        return selector in self._matches

    def following_siblings(self) -> List["FakeNode"]:
        return list(self._siblings)


def _day(letter: str, active: bool) -> FakeNode:
    return FakeNode(text=letter, classes={"day", "active"} if active else {"day"})


class TestSyntheticTrees(unittest.TestCase):
    def test_subjects_from_synthetic_tree(self) -> None:
        root = FakeNode(
            selections={
                "#form-search-subject option": [
                    FakeNode(text="Choose one", attrs={"value": ""}),
                    FakeNode(text="Art", attrs={"value": "ART"}),
                    FakeNode(text="Missing value"),
                ]
            }
        )
        subjects = discover_subjects_from_document(root)
        self.assertEqual([(s.code, s.description) for s in subjects], [("ART", "Art")])

    def test_courses_from_synthetic_tree(self) -> None:
        meeting = FakeNode(
            selections={"td.day": [_day("M", True), _day("T", False), _day("W", True)]},
            siblings=[FakeNode(text=" 10:00 am - 10:50 am ", matches={"span.break"})],
        )
        cells = [FakeNode(text=str(i)) for i in range(16)]
        cells[0] = FakeNode(text=" 80001 ")
        cells[2] = FakeNode(text="Intro to Things")
        cells[3] = FakeNode(text="3")
        cells[4] = FakeNode(text="Lee,\n\tAnn")
        cells[9] = FakeNode(selections={"table.table-course-days": [meeting]})
        cells[12] = FakeNode(text="IT 1202 Building", selections={"strong": [FakeNode(text="IT 1202")]})
        cells[15] = FakeNode(text="(5 / 25)")
        row = FakeNode(selections={":scope > td": cells})
        table = FakeNode(selections={":scope > tbody > tr": [row]})
        root = FakeNode(selections={"#results-table": [table]})

        (record,) = extract_courses_from_document(root, "IT")

        self.assertEqual(record.crn, "80001")
        self.assertEqual(record.subject, "IT")
        self.assertEqual(record.instructor, "Lee, Ann")
        self.assertEqual(record.days, "MW")
        self.assertEqual((record.start_time, record.end_time), ("10:00 am", "10:50 am"))
        self.assertEqual(record.location, "IT 1202")
        self.assertEqual(record.seats_available, "20")

    def test_empty_synthetic_tree(self) -> None:
        self.assertEqual(extract_courses_from_document(FakeNode()), [])


class TestSoupNode(unittest.TestCase):
    def test_queries(self) -> None:
        root = load_document('<div id="a" class="x y"><b>one</b><i>two</i><b>three</b></div>')
        div = root.select_one("#a")
        assert div is not None

        self.assertTrue(div.has_class("y"))
        self.assertFalse(div.has_class("z"))
        self.assertEqual(div.attr("id"), "a")
        self.assertEqual(div.attr("class"), "x y")
        self.assertIsNone(div.attr("href"))
        self.assertEqual(div.text(), "onetwothree")
        self.assertIsNone(root.select_one("table"))

        first = div.select("b")[0]
        self.assertTrue(first.matches("b"))
        self.assertFalse(first.matches("i"))
        self.assertEqual([n.text() for n in first.following_siblings()], ["two", "three"])

    def test_scope_selects_direct_children_only(self) -> None:
        root = load_document("<table id='t'><tr><td>a<table><tr><td>x</td></tr></table></td><td>b</td></tr></table>")
        table = root.select_one("#t")
        assert table is not None
        row = table.select(":scope > tr")[0]
        self.assertEqual(len(row.select(":scope > td")), 2)
        self.assertEqual(len(row.select("td")), 3)


if __name__ == "__main__":
    unittest.main()

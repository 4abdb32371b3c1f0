import unittest

from epubread.metadata import DUBLIN_CORE_ELEMENTS, dublin_core_values, get_all, is_dublin_core, normalize
from epubread.models import MetaEntry

OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"

SAMPLE = {
    DC_NS: {
        "title": (MetaEntry("Main Title", {"id": "t1"}), MetaEntry("Subtitle")),
        "creator": (MetaEntry("Ada"),),
        "Subject": (MetaEntry("Math"), MetaEntry("")),
        "identifier": (MetaEntry("", {"content": "ignored-for-dc"}),),
    },
    OPF_NS: {
        "meta": (
            MetaEntry("", {"name": "cover", "content": "cover-image"}),
            MetaEntry("2024-05-01T00:00:00Z", {"property": "dcterms:modified"}),
            MetaEntry("loose value"),
            MetaEntry("", {"refines": "#t1"}),
        ),
        "link": (MetaEntry("", {"href": "record.xml"}),),
    },
}


class DublinCoreSetTests(unittest.TestCase):
    def test_fifteen_sorted_elements(self) -> None:
        self.assertEqual(len(DUBLIN_CORE_ELEMENTS), 15)
        self.assertEqual(list(DUBLIN_CORE_ELEMENTS), sorted(DUBLIN_CORE_ELEMENTS))

    def test_membership_ignores_case(self) -> None:
        self.assertTrue(is_dublin_core("Title"))
        self.assertTrue(is_dublin_core("rights"))
        self.assertFalse(is_dublin_core("meta"))
        self.assertFalse(is_dublin_core("titles"))
        self.assertFalse(is_dublin_core(""))


class GetAllTests(unittest.TestCase):
    def test_meta_keys_and_content_fallback(self) -> None:
        result = get_all(SAMPLE)
        self.assertEqual(result["title"], ["Main Title", "Subtitle"])
        self.assertEqual(result["meta:cover"], ["cover-image"])
        self.assertEqual(result["meta:dcterms:modified"], ["2024-05-01T00:00:00Z"])
        self.assertEqual(result["meta"], ["loose value"])
        self.assertEqual(result["identifier"], ["ignored-for-dc"])
        self.assertNotIn("link", result)

    def test_never_emits_empty_values(self) -> None:
        for values in get_all(SAMPLE).values():
            self.assertTrue(values)
            self.assertTrue(all(values))


class NormalizeTests(unittest.TestCase):
    def test_only_dublin_core_text_values(self) -> None:
        result = normalize(SAMPLE)
        self.assertEqual(
            result,
            {
                "title": ["Main Title", "Subtitle"],
                "creator": ["Ada"],
                "subject": ["Math"],
            },
        )

    def test_values_by_key(self) -> None:
        self.assertEqual(dublin_core_values(SAMPLE, " TITLE "), ["Main Title", "Subtitle"])
        self.assertEqual(dublin_core_values(SAMPLE, "publisher"), [])
        self.assertEqual(dublin_core_values(SAMPLE, "meta"), [])


if __name__ == "__main__":
    unittest.main()

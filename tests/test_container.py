import unittest

from epubread.container import Container, Rootfile, parse_container
from epubread.errors import ContainerMalformed, NoRootFileFound, StructuralParseError

CONTAINER_NS = "urn:oasis:names:tc:opendocument:xmlns:container"


def _container_xml(rootfiles: str) -> bytes:
    return (
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>"
        f"<container version=\"1.0\" xmlns=\"{CONTAINER_NS}\">"
        f"{rootfiles}"
        "</container>"
    ).encode("utf-8")


class ParseContainerTests(unittest.TestCase):
    def test_finds_package_document(self) -> None:
        container = parse_container(
            _container_xml(
                "<rootfiles><rootfile full-path=\"OEBPS/content.opf\" "
                "media-type=\"application/oebps-package+xml\"/></rootfiles>"
            )
        )
        self.assertEqual(
            container.rootfiles,
            (Rootfile(full_path="OEBPS/content.opf", media_type="application/oebps-package+xml"),),
        )
        self.assertEqual(container.find_opf_file(), "OEBPS/content.opf")

    def test_rootfiles_keep_document_order(self) -> None:
        container = parse_container(
            _container_xml(
                "<rootfiles>"
                "<rootfile full-path=\"\" media-type=\"application/oebps-package+xml\"/>"
                "<rootfile full-path=\"alt.pdf\" media-type=\"application/pdf\"/>"
                "<rootfile full-path=\"second.opf\"/>"
                "<rootfile full-path=\"third.opf\" media-type=\"application/oebps-package+xml\"/>"
                "</rootfiles>"
            )
        )
        self.assertEqual(len(container.rootfiles), 4)
        self.assertEqual(container.find_opf_file(), "second.opf")

    def test_epub_media_type_is_accepted(self) -> None:
        container = Container(rootfiles=(Rootfile("book.opf", "Application/EPUB+zip"),))
        self.assertEqual(container.find_opf_file(), "book.opf")

    def test_missing_rootfiles_is_malformed(self) -> None:
        with self.assertRaises(ContainerMalformed) as ctx:
            parse_container(_container_xml(""))
        self.assertEqual(ctx.exception.path, "META-INF/container.xml")

    def test_empty_rootfiles_is_malformed(self) -> None:
        with self.assertRaises(ContainerMalformed):
            parse_container(_container_xml("<rootfiles></rootfiles>"))

    def test_no_package_rootfile(self) -> None:
        container = parse_container(
            _container_xml(
                "<rootfiles><rootfile full-path=\"book.pdf\" media-type=\"application/pdf\"/></rootfiles>"
            )
        )
        with self.assertRaises(NoRootFileFound):
            container.find_opf_file()

    def test_unparseable_container(self) -> None:
        with self.assertRaises(StructuralParseError):
            parse_container(b"")


if __name__ == "__main__":
    unittest.main()

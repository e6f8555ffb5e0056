"""
Link normalisation for site_crawler: deduplication, suffix filtering and
resolution of discovered links against the page they were found on.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence
from urllib.parse import urljoin, urlsplit

from site_crawler.logger import get_logger
from site_crawler.utils import remove_duplicates, strip_fragment

logger = get_logger(__name__)

__all__: Sequence[str] = (
    "UNPARSEABLE_FILE_SUFFIXES",
    "is_parseable_url",
    "remove_unparseable_urls",
    "resolve_url",
    "normalize_links",
)

# path endings that never lead to text content
UNPARSEABLE_FILE_SUFFIXES: tuple[str, ...] = (
    # images
    ".jpg", ".jpeg", ".png", ".img", ".svg", ".gif", ".bmp", ".tif", ".tiff",
    # office documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    ".odt", ".ods", ".odp", ".rtf", ".ott", ".pot", ".sldx", ".sldm",
    ".ppsx", ".ppsm", ".docm", ".dotm", ".xlsm", ".xltx", ".xltm",
    ".xlam", ".ppam", ".docb",
    # audio and video
    ".wav", ".mp3", ".mp4", ".avi", ".mov", ".wmv", ".flv",
    # archives and compression
    ".zip", ".tar", ".gz", ".rar", ".7z", ".bz2", ".xz", ".lz4", ".zstd",
    # binaries and packages
    ".exe", ".dll", ".bin", ".jar", ".iso", ".war", ".ear", ".class",
    ".o", ".obj", ".so", ".a", ".lib", ".rpm", ".deb", ".apk", ".ipa",
    ".dmg", ".pkg", ".app", ".msi", ".sys", ".pyc", ".pyd", ".pdb",
    ".dylib", ".msp", ".mst", ".aar",
    # misc data and system files
    ".ini", ".bak", ".tmp", ".swp", ".dat", ".db", ".sql", ".reg",
    ".xhtml", ".mht", ".mhtml", ".eml", ".msg", ".oft", ".vcf", ".ics",
    # scripts
    ".bat", ".sh", ".cmd", ".ps1", ".bash", ".zsh", ".csh", ".tcsh",
    ".ksh", ".awk", ".sed",
    # geo data and subtitles
    ".gpx", ".kml", ".kmz", ".srt", ".sub", ".ass", ".ssa", ".vtt",
    ".sbv", ".mpsub", ".lrc", ".ttml", ".dfxp", ".smi",
    # schemas and serialisation formats
    ".xslt", ".xsd", ".wsdl", ".soap", ".protobuf", ".thrift", ".avro",
    ".msgpack", ".cbor", ".pickle", ".dill", ".joblib", ".hdf5", ".pkl",
    # known non-content paths
    "wp-login.php", "wp-admin",
)


def is_parseable_url(url: str) -> bool:
    """False for empty links and links whose path ends in a denied suffix."""
    if not url:
        return False
    try:
        path = urlsplit(strip_fragment(url).split("?", 1)[0]).path.lower()
    except ValueError:
        return False
    return not path.endswith(UNPARSEABLE_FILE_SUFFIXES)


def remove_unparseable_urls(urls: Iterable[str]) -> List[str]:
    return [url for url in urls if is_parseable_url(url)]


def resolve_url(link: str, parent_url: str) -> str:
    """
    Resolve *link* against *parent_url*.

    Relative links inherit scheme and host of the parent, absolute links
    pass through. The fragment is always dropped.
    """
    return strip_fragment(urljoin(parent_url, link))


def normalize_links(links: Iterable[str], parent_url: str) -> List[str]:
    """Deduplicate, filter and resolve the links found on *parent_url*, in that order."""
    unique = remove_duplicates(list(links))
    resolved: List[str] = []
    for link in remove_unparseable_urls(unique):
        try:
            resolved.append(resolve_url(link, parent_url))
        except ValueError:
            logger.debug("Dropping unresolvable link %r on %s", link, parent_url)
    return resolved

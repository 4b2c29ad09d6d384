"""XML namespaces declared by GnuCash v2 documents."""

NAMESPACES = {
    "gnc": "http://www.gnucash.org/XML/gnc",
    "act": "http://www.gnucash.org/XML/act",
    "book": "http://www.gnucash.org/XML/book",
    "cd": "http://www.gnucash.org/XML/cd",
    "cmdty": "http://www.gnucash.org/XML/cmdty",
    "price": "http://www.gnucash.org/XML/price",
    "slot": "http://www.gnucash.org/XML/slot",
    "split": "http://www.gnucash.org/XML/split",
    "sx": "http://www.gnucash.org/XML/sx",
    "trn": "http://www.gnucash.org/XML/trn",
    "ts": "http://www.gnucash.org/XML/ts",
    "bgt": "http://www.gnucash.org/XML/bgt",
}

ROOT_TAG = "gnc-v2"
GZIP_MAGIC = b"\x1f\x8b"


def qualified(name: str) -> str:
    """Turn ``prefix:local`` into ElementTree's ``{uri}local`` form."""
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    return f"{{{NAMESPACES[prefix]}}}{local}"


__all__ = ["NAMESPACES", "ROOT_TAG", "GZIP_MAGIC", "qualified"]

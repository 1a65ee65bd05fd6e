import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from manifest_index import log
from manifest_index.config_loader import ANDROID_NS

DEFAULT_NAMESPACES = {"android": ANDROID_NS}


class XmlElement:
    """
    Read access to one node of a parsed manifest.
    Attribute names may be prefixed ("android:name"); the prefix is mapped to
    its namespace URI before the lookup.
    """

    def __init__(self, node: ET.Element, document: "XmlDocument"):
        self.node = node
        self.document = document

    @property
    def tag(self) -> str:
        return self.node.tag

    def attribute(self, name: str) -> Optional[str]:
        return self.node.get(self.document.qualify(name))

    def children(self, tag: str) -> List["XmlElement"]:
        return [XmlElement(child, self.document) for child in self.node.findall(tag)]

    def parent(self) -> Optional["XmlElement"]:
        parent = self.document.parent_map().get(self.node)
        if parent is None:
            return None
        return XmlElement(parent, self.document)

    def query(self, path: str) -> List["XmlElement"]:
        """Relative path query, e.g. "intent-filter/action"."""
        return [XmlElement(node, self.document) for node in self.node.findall(path)]

    def __eq__(self, other):
        return isinstance(other, XmlElement) and other.node is self.node

    def __hash__(self):
        return id(self.node)

    def __repr__(self):
        return f"<XmlElement {self.tag} {dict(self.node.attrib)}>"


class XmlDocument:
    def __init__(self, tree: ET.ElementTree, namespaces: Optional[Dict[str, str]] = None):
        self.tree = tree
        self.namespaces = dict(namespaces or DEFAULT_NAMESPACES)
        for prefix, uri in self.namespaces.items():
            ET.register_namespace(prefix, uri)

    @classmethod
    def parse(cls, path: str, namespaces: Optional[Dict[str, str]] = None) -> "XmlDocument":
        try:
            tree = ET.parse(path)
        except ET.ParseError as e:
            log.error(f"Error parsing manifest {path}: {e}")
            raise
        except FileNotFoundError:
            log.error(f"Manifest not found at: {path}")
            raise
        return cls(tree, namespaces)

    @property
    def root(self) -> XmlElement:
        return XmlElement(self.tree.getroot(), self)

    def qualify(self, name: str) -> str:
        """Turns "android:name" into ElementTree's "{uri}name" form."""
        prefix, sep, local = name.partition(":")
        if not sep or prefix not in self.namespaces:
            return name
        return f"{{{self.namespaces[prefix]}}}{local}"

    def parent_map(self) -> Dict[ET.Element, ET.Element]:
        # Rebuilt on every call so in-place edits to the tree are observed.
        return {child: parent for parent in self.tree.iter() for child in parent}

    def query(self, path: str) -> List[XmlElement]:
        """
        Absolute path query such as "/manifest/application/activity".
        The first segment has to name the root element.
        """
        segments = [s for s in path.strip("/").split("/") if s]
        root = self.tree.getroot()
        if not segments or segments[0] != root.tag:
            return []
        if len(segments) == 1:
            return [XmlElement(root, self)]
        return [XmlElement(node, self) for node in root.findall("/".join(segments[1:]))]

    def write(self, path: str):
        self.tree.write(path, encoding="utf-8", xml_declaration=True)

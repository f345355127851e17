"""
preset_engine.xml_parser - Turn a preset bundle into settings + field descriptors.

Responsibilities:
  • BOM removal before handing bytes to the XML parser
  • Settings allow-list filtering, integer settings checked for digits
  • Field type sanitising (letters only)
  • Pulling the HTML/CSS/JS templates out of the bundle
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from xml.etree.ElementTree import Element, ParseError as XMLSyntaxError

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as DefusedET

from preset_engine.errors import ParseError
from preset_engine.field_map import (
    ALLOWED_SETTINGS,
    INTEGER_SETTINGS,
    PRESET_FILE,
    TEMPLATES_LIST,
)
from preset_engine.sources import PresetSource

_NON_ALPHA = re.compile(r"[^a-zA-Z]")
_INTEGER = re.compile(r"^\s*[+-]?\d+\s*$")


@dataclass
class FieldDescriptor:
    """One <field> block, not yet persisted."""
    temporary_id: int
    dataid: int
    name: str
    type: str
    description: str = ""
    params: dict[str, str] = field(default_factory=dict)

    def attributes(self) -> dict[str, object]:
        """Flat view: every sub-element of the block plus dataid."""
        attrs: dict[str, object] = dict(self.params)
        attrs.update(
            dataid=self.dataid, name=self.name, type=self.type,
            description=self.description,
        )
        return attrs


@dataclass
class ParsedPreset:
    settings: dict[str, object]
    fields: list[FieldDescriptor]


def clean_type(value: str) -> str:
    return _NON_ALPHA.sub("", value or "")


def parse_preset(source: PresetSource, dataid: int) -> ParsedPreset:
    """Read preset.xml and the templates from *source*."""
    raw = source.read(PRESET_FILE)
    if raw is None:
        raise ParseError(f"{PRESET_FILE} not found in preset {source.name!r}")

    root = _parse_xml(raw)
    if root.tag != "preset":
        raise ParseError(f"Root element is <{root.tag}>, expected <preset>")

    settings_el = root.find("settings")
    if settings_el is None:
        raise ParseError("Missing <settings> block")

    settings: dict[str, object] = {}
    for child in settings_el:
        if child.tag not in ALLOWED_SETTINGS:
            continue
        settings[child.tag] = _text(child)
        if child.tag in INTEGER_SETTINGS:
            _check_integer(settings[child.tag], f"setting <{child.tag}>")

    fields = [
        _parse_field(block, idx, dataid)
        for idx, block in enumerate(root.findall("field"))
    ]

    for template_name, filename in TEMPLATES_LIST.items():
        content = source.read(filename)
        settings[template_name] = _decode(content) if content is not None else None

    settings["instance"] = dataid
    return ParsedPreset(settings=settings, fields=fields)


# ── Private helpers ────────────────────────────────────────────────────

def _parse_xml(raw: bytes) -> Element:
    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]
    try:
        return DefusedET.fromstring(raw)
    except (XMLSyntaxError, DefusedXmlException) as exc:
        raise ParseError(f"Malformed {PRESET_FILE}: {exc}") from exc


def _parse_field(block: Element, idx: int, dataid: int) -> FieldDescriptor:
    values = {child.tag: _text(child) for child in block}
    name = values.pop("name", None)
    ftype = values.pop("type", None)
    if not name or ftype is None:
        raise ParseError(f"Field #{idx + 1} has no name or type")
    if "required" in values:
        _check_integer(values["required"], f"field {name!r} <required>")
    description = values.pop("description", "")
    # The preset's own ids mean nothing in this site
    values.pop("id", None)
    values.pop("dataid", None)
    return FieldDescriptor(
        temporary_id=idx,
        dataid=dataid,
        name=name,
        type=clean_type(ftype),
        description=description,
        params=values,
    )


def _text(el: Element) -> str:
    return el.text or ""


def _check_integer(value: str, label: str):
    # Empty is allowed; the model stores it as 0
    if value and not _INTEGER.match(value):
        raise ParseError(f"Invalid {label}: {value!r} is not an integer")


def _decode(raw: bytes) -> str:
    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]
    return raw.decode("utf-8", errors="replace")
